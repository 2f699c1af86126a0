"""Shared fixtures for the tic-tac-toe tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

import pytest


@dataclass
class ScheduledCall:
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.calls: List[ScheduledCall] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(due=self.now + delay, callback=callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[ScheduledCall]:
        return [c for c in self.calls if not c.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        while True:
            due = [c for c in self.pending if c.due <= self.now]
            if not due:
                return
            for call in due:
                self.calls.remove(call)
                call.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
