"""Unit tests for board evaluation."""

import itertools

import pytest

from tictactoe.game import (
    EMPTY,
    WINNING_LINES,
    Mark,
    Outcome,
    empty_cells,
    evaluate,
    is_draw,
    is_full,
    new_board,
    validate_board,
)

_ = EMPTY
X = Mark.X.value
O = Mark.O.value


def test_empty_board_is_undecided():
    board = new_board()
    assert len(board) == 9
    assert evaluate(board) is Outcome.NONE
    assert not is_full(board)
    assert not is_draw(board)
    assert empty_cells(board) == list(range(9))


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_wins_for_either_mark(line):
    for mark, expected in ((X, Outcome.WIN_X), (O, Outcome.WIN_O)):
        board = new_board()
        for index in line:
            board[index] = mark
        assert evaluate(board) is expected


def test_two_in_a_row_is_not_a_win():
    board = [X, X, _, O, O, _, _, _, _]
    assert evaluate(board) is Outcome.NONE


def test_full_board_without_line_is_draw():
    board = [X, O, X, X, O, O, O, X, X]
    assert is_full(board)
    assert evaluate(board) is Outcome.NONE
    assert is_draw(board)


def test_full_board_with_line_is_not_draw():
    board = [X, X, X, O, O, X, O, X, O]
    assert evaluate(board) is Outcome.WIN_X
    assert not is_draw(board)


def test_board_with_lines_for_both_marks_does_not_crash():
    board = [X, X, X, O, O, O, _, _, _]
    assert evaluate(board) in (Outcome.WIN_X, Outcome.WIN_O)


def test_evaluate_is_total_and_only_reports_complete_lines():
    for cells in itertools.product((_, X, O), repeat=9):
        board = list(cells)
        outcome = evaluate(board)
        if outcome is Outcome.NONE:
            assert not any(
                board[a] != _ and board[a] == board[b] == board[c]
                for a, b, c in WINNING_LINES
            )
        else:
            mark = outcome.winner.value
            assert any(
                board[a] == board[b] == board[c] == mark for a, b, c in WINNING_LINES
            )
        assert is_draw(board) == (is_full(board) and outcome is Outcome.NONE)


def test_evaluate_does_not_modify_board():
    board = [X, O, _, _, X, _, O, _, X]
    snapshot = list(board)
    evaluate(board)
    assert board == snapshot


@pytest.mark.parametrize(
    "board",
    [
        [_] * 8,
        [_] * 10,
        [_, _, _, _, "Z", _, _, _, _],
    ],
)
def test_validate_board_rejects_malformed_boards(board):
    with pytest.raises(ValueError):
        validate_board(board)


def test_mark_opponent():
    assert Mark.X.opponent() is Mark.O
    assert Mark.O.opponent() is Mark.X
