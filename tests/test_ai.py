"""Tests for the minimax AI."""

import random

import pytest

from tictactoe.ai import MinimaxAI, select_move
from tictactoe.game import EMPTY, Mark, empty_cells, evaluate, is_draw, is_full, new_board

_ = EMPTY
X = Mark.X.value
O = Mark.O.value


def test_ai_takes_immediate_win():
    board = [O, O, _, X, X, _, X, _, _]
    assert select_move(board) == 2


def test_ai_blocks_opponent_line():
    board = [X, X, _, _, O, _, _, _, _]
    assert select_move(board) == 2


def test_ai_prefers_fastest_win():
    # Cell 2 also wins (double threat) but only two plies later.
    board = [O, X, _, X, O, X, _, _, _]
    assert select_move(board) == 8


def test_ties_go_to_lowest_index():
    assert MinimaxAI(player=Mark.X).choose(new_board()) == 0


def test_ai_does_not_modify_callers_board():
    board = [X, _, _, _, _, _, _, _, _]
    snapshot = list(board)
    move = select_move(board)
    assert board == snapshot
    assert board[move] == _


def test_ai_refuses_full_board():
    with pytest.raises(ValueError):
        select_move([X, O, X, X, O, O, O, X, X])


def test_ai_rejects_malformed_board():
    with pytest.raises(ValueError):
        select_move([_] * 8)


def test_ai_only_picks_empty_cells():
    rng = random.Random(1234)
    ai = MinimaxAI(player=Mark.O)
    for _game in range(30):
        board = new_board()
        mark = Mark.X
        while evaluate(board).winner is None and not is_full(board):
            if mark is Mark.O:
                move = ai.choose(board)
                assert move in empty_cells(board)
            else:
                move = rng.choice(empty_cells(board))
            board[move] = mark.value
            mark = mark.opponent()


def test_ai_never_loses_to_random_play():
    rng = random.Random(99)
    ai = MinimaxAI(player=Mark.O)
    for _game in range(20):
        board = new_board()
        mark = Mark.X
        while evaluate(board).winner is None and not is_full(board):
            if mark is Mark.O:
                move = ai.choose(board)
            else:
                move = rng.choice(empty_cells(board))
            board[move] = mark.value
            mark = mark.opponent()
        assert evaluate(board).winner is not Mark.X


def test_self_play_from_empty_board_is_a_draw():
    players = {Mark.X: MinimaxAI(player=Mark.X), Mark.O: MinimaxAI(player=Mark.O)}
    board = new_board()
    mark = Mark.X
    while evaluate(board).winner is None and not is_full(board):
        board[players[mark].choose(board)] = mark.value
        mark = mark.opponent()
    assert is_draw(board)


def test_nodes_evaluated_is_reset_per_search():
    ai = MinimaxAI(player=Mark.O)
    ai.choose([X, _, _, _, _, _, _, _, _])
    first = ai.nodes_evaluated
    ai.choose([X, X, _, _, O, _, _, _, _])
    assert 0 < ai.nodes_evaluated < first
