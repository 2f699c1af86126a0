"""Board representation and outcome evaluation for 3x3 tic-tac-toe."""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence, Tuple

EMPTY = " "

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

BOARD_SIZE = 9


class Mark(str, Enum):
    """The value a player writes into a cell."""

    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


class Outcome(Enum):
    NONE = "none"
    WIN_X = "win_x"
    WIN_O = "win_o"

    @property
    def winner(self) -> "Mark | None":
        if self is Outcome.WIN_X:
            return Mark.X
        if self is Outcome.WIN_O:
            return Mark.O
        return None


Board = List[str]

_VALID_CELLS = (EMPTY, Mark.X.value, Mark.O.value)


def new_board() -> Board:
    return [EMPTY] * BOARD_SIZE


def validate_board(board: Sequence[str]) -> None:
    """Reject anything that is not a 9-cell board of EMPTY, X or O."""
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    for index, cell in enumerate(board):
        if cell not in _VALID_CELLS:
            raise ValueError(f"Invalid cell value {cell!r} at index {index}")


def evaluate(board: Sequence[str]) -> Outcome:
    """
    Report a win for the mark owning the first complete line, else NONE.

    A full board without a line is still NONE; use :func:`is_draw` for that.
    Boards that could never occur in play (both marks holding a line) are
    accepted and resolved by line order.
    """
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return Outcome.WIN_X if v == Mark.X else Outcome.WIN_O
    return Outcome.NONE


def is_full(board: Sequence[str]) -> bool:
    return all(c != EMPTY for c in board)


def is_draw(board: Sequence[str]) -> bool:
    return is_full(board) and evaluate(board) is Outcome.NONE


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]
