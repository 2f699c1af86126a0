"""Tic-tac-toe package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, select_move
from .game import Mark, Outcome, evaluate, is_draw, is_full
from .session import GameMode, GameSession
from .ui import app

__all__ = [
    "GameMode",
    "GameSession",
    "Mark",
    "MinimaxAI",
    "Outcome",
    "app",
    "evaluate",
    "is_draw",
    "is_full",
    "select_move",
]
