"""Turn and result state machine for a single tic-tac-toe game."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .ai import MinimaxAI
from .game import (
    BOARD_SIZE,
    EMPTY,
    Board,
    Mark,
    Outcome,
    evaluate,
    is_full,
    new_board,
    validate_board,
)

logger = logging.getLogger(__name__)

DEFAULT_AI_DELAY = 1.0


class GameMode(str, Enum):
    HUMAN = "human"
    COMPUTER = "computer"

    def toggled(self) -> "GameMode":
        return GameMode.COMPUTER if self is GameMode.HUMAN else GameMode.HUMAN


PLAYER_LABELS: Dict[GameMode, Dict[Mark, str]] = {
    GameMode.HUMAN: {Mark.X: "Player 1", Mark.O: "Player 2"},
    GameMode.COMPUTER: {Mark.X: "Player", Mark.O: "Computer"},
}

MODE_LABELS: Dict[GameMode, str] = {
    GameMode.HUMAN: "Human vs Human",
    GameMode.COMPUTER: "Human vs Computer",
}

# Text of the button that switches to the other mode.
TOGGLE_LABELS: Dict[GameMode, str] = {
    GameMode.HUMAN: "Vs Computer",
    GameMode.COMPUTER: "Vs Player",
}

FIRST_MOVER = Mark.X
COMPUTER_MARK = Mark.O


def player_label(mode: GameMode, mark: Mark) -> str:
    return PLAYER_LABELS[mode][mark]


# ---------- Scheduling ----------


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Runs each callback once on a daemon ``threading.Timer``."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        timer = threading.Timer(max(0.0, delay), callback)
        timer.daemon = True
        timer.start()
        return timer


# ---------- Session ----------


@dataclass
class GameSession:
    """
    One game plus its optional computer opponent.

    The session owns the single pending computer move. ``new_game`` and
    ``toggle_mode`` cancel it before touching the board, and every scheduled
    callback carries the generation it was created in so that one which has
    already fired but not yet acquired the lock is ignored after a reset.
    """

    mode: GameMode = GameMode.HUMAN
    scheduler: Scheduler = field(default_factory=ThreadingScheduler, repr=False)
    ai_delay: float = DEFAULT_AI_DELAY
    ai: MinimaxAI = field(
        default_factory=lambda: MinimaxAI(player=COMPUTER_MARK), repr=False
    )

    _board: Board = field(default_factory=new_board, init=False, repr=False)
    turn: Mark = field(default=FIRST_MOVER, init=False)
    active: bool = field(default=True, init=False)
    outcome: Optional[Outcome] = field(default=None, init=False)
    drawn: bool = field(default=False, init=False)
    _move_log: List[Dict[str, object]] = field(
        default_factory=list, init=False, repr=False
    )

    _pending: Optional[Cancellable] = field(default=None, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)
    lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    @classmethod
    def from_position(
        cls, board: Sequence[str], turn: Mark = FIRST_MOVER, **kwargs: Any
    ) -> "GameSession":
        """Start a session from an in-progress position with ``turn`` to move."""
        validate_board(board)
        session = cls(**kwargs)
        session._board = list(board)
        session.turn = turn
        session._update_outcome()
        return session

    # ---- observables ----

    @property
    def board(self) -> Board:
        return list(self._board)

    @property
    def move_log(self) -> List[Dict[str, object]]:
        return [dict(move) for move in self._move_log]

    @property
    def game_over(self) -> bool:
        return not self.active

    @property
    def winner(self) -> Optional[Mark]:
        return self.outcome.winner if self.outcome else None

    @property
    def current_label(self) -> str:
        return player_label(self.mode, self.turn)

    @property
    def mode_label(self) -> str:
        return MODE_LABELS[self.mode]

    @property
    def toggle_label(self) -> str:
        return TOGGLE_LABELS[self.mode]

    @property
    def ai_pending(self) -> bool:
        return self._pending is not None

    @property
    def computer_to_move(self) -> bool:
        return self.mode is GameMode.COMPUTER and self.turn is COMPUTER_MARK

    @property
    def status(self) -> str:
        winner = self.winner
        if winner is not None:
            return f"{player_label(self.mode, winner)} Wins!"
        if self.drawn:
            return "Draw!"
        return f"{self.current_label}'s turn"

    # ---- transitions ----

    def apply_move(self, cell_index: int) -> bool:
        """Play ``cell_index`` for the side to move.

        Returns False, leaving the game untouched, when the game is over, the
        index is off the board, the cell is taken or the computer is to move.
        """
        with self.lock:
            if self.computer_to_move:
                return False
            if not self._place(cell_index):
                return False
            if self.active and self.computer_to_move:
                self._schedule_computer_move()
            return True

    def new_game(self) -> None:
        with self.lock:
            self._cancel_pending()
            self._board = new_board()
            self.turn = FIRST_MOVER
            self.active = True
            self.outcome = None
            self.drawn = False
            self._move_log = []
            logger.info("New game started (%s)", self.mode.value)

    def toggle_mode(self) -> None:
        with self.lock:
            self.mode = self.mode.toggled()
            logger.info("Mode switched to %s", self.mode.value)
            self.new_game()

    def close(self) -> None:
        """Drop any pending computer move; the session is being discarded."""
        with self.lock:
            self._cancel_pending()

    # ---- helpers ----

    def _place(self, cell_index: int) -> bool:
        if not self.active:
            return False
        if isinstance(cell_index, bool) or not isinstance(cell_index, int):
            return False
        if not 0 <= cell_index < BOARD_SIZE:
            return False
        if self._board[cell_index] != EMPTY:
            return False

        mark = self.turn
        self._board[cell_index] = mark.value
        self._move_log.append({"mark": mark.value, "cellIndex": cell_index})
        self.turn = mark.opponent()
        logger.debug("%s played cell %d", mark.value, cell_index)
        self._update_outcome()
        return True

    def _update_outcome(self) -> None:
        result = evaluate(self._board)
        if result is not Outcome.NONE:
            self.outcome = result
            self.active = False
        elif is_full(self._board):
            self.drawn = True
            self.active = False
        if not self.active:
            logger.info("Game over: %s", self.status)

    def _schedule_computer_move(self) -> None:
        self._cancel_pending()
        generation = self._generation
        self._pending = self.scheduler.schedule(
            self.ai_delay, lambda: self._run_computer_move(generation)
        )
        logger.debug("Computer move scheduled in %.2fs", self.ai_delay)

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("Pending computer move cancelled")

    def _run_computer_move(self, generation: int) -> None:
        with self.lock:
            if generation != self._generation:
                return
            self._pending = None
            if not self.active or not self.computer_to_move:
                return
            self._place(self.ai.choose(self._board))
