"""Exhaustive minimax AI for 3x3 tic-tac-toe."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .game import (
    EMPTY,
    Mark,
    Outcome,
    empty_cells,
    evaluate,
    is_full,
    validate_board,
)

logger = logging.getLogger(__name__)

WIN_SCORE = 10


@dataclass
class MinimaxAI:
    """AI player that searches the full game tree before every move.

    Scores are depth adjusted (``10 - depth`` for a win, ``-10 + depth`` for a
    loss) so that among equal results the quickest win and the slowest loss
    are preferred. Candidate cells are scanned from 0 to 8 and the best move is
    only replaced on a strict improvement, so ties go to the lower index.

      - MinimaxAI(player=Mark.O)
      - choose(board) -> cell_index
    """

    player: Mark = Mark.O
    nodes_evaluated: int = field(default=0, init=False)
    _tt: Dict[Tuple[Tuple[str, ...], bool], int] = field(
        default_factory=dict, init=False, repr=False
    )

    # ---- public API ----

    def choose(self, board: Sequence[str]) -> int:
        validate_board(board)
        if is_full(board):
            raise ValueError("No valid moves available")

        # Search a private copy; the caller's board is never touched.
        work: List[str] = list(board)
        me = self.player.value
        self._tt.clear()
        self.nodes_evaluated = 0

        best_score: Optional[int] = None
        best_move = -1
        for i in empty_cells(work):
            work[i] = me
            score = self._minimax(work, 0, False)
            work[i] = EMPTY
            if best_score is None or score > best_score:
                best_score, best_move = score, i

        logger.debug(
            "%s chose cell %d (score %s, %d nodes)",
            me,
            best_move,
            best_score,
            self.nodes_evaluated,
        )
        return best_move

    # ---- core search ----

    def _minimax(self, board: List[str], depth: int, maximizing: bool) -> int:
        # Within one search a position's depth follows from how many cells are
        # filled, so (cells, side to move) identifies the exact score.
        key = (tuple(board), maximizing)
        cached = self._tt.get(key)
        if cached is not None:
            return cached

        self.nodes_evaluated += 1
        score = self._score(board, depth, maximizing)
        self._tt[key] = score
        return score

    def _score(self, board: List[str], depth: int, maximizing: bool) -> int:
        outcome = evaluate(board)
        if outcome is not Outcome.NONE:
            if outcome.winner is self.player:
                return WIN_SCORE - depth
            return -WIN_SCORE + depth
        if is_full(board):
            return 0

        if maximizing:
            mark = self.player.value
            best = -1000
            for i in range(len(board)):
                if board[i] == EMPTY:
                    board[i] = mark
                    best = max(best, self._minimax(board, depth + 1, False))
                    board[i] = EMPTY
            return best

        mark = self.player.opponent().value
        best = 1000
        for i in range(len(board)):
            if board[i] == EMPTY:
                board[i] = mark
                best = min(best, self._minimax(board, depth + 1, True))
                board[i] = EMPTY
        return best


def select_move(board: Sequence[str]) -> int:
    """Best cell for the computer (O) on ``board``."""
    return MinimaxAI(player=Mark.O).choose(board)
