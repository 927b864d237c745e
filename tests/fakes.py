# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from tasklane.core.errors import PersistenceFailure
from tasklane.core.state import AppState


class FixedClock:
    """
    Deterministic clock for unit tests.

    - Returns the same instant until advanced
    - Callable, so it satisfies the Clock port
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class SeqIds:
    """Predictable task ids: id0001, id0002, ..."""

    def __init__(self) -> None:
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"id{self.n:04d}"


@dataclass(slots=True)
class MemoryStateStore:
    """
    In-memory StateStore used by engine tests.

    Keeps every saved snapshot so tests can assert on write order and count.
    """

    initial: AppState | None = None
    saved: list[AppState] = field(default_factory=list)

    def load(self) -> AppState | None:
        return self.saved[-1] if self.saved else self.initial

    def save(self, state: AppState) -> None:
        self.saved.append(state)


@dataclass(slots=True)
class FailingStateStore:
    """StateStore whose writes always fail (quota exceeded, disk gone, ...)."""

    attempts: int = 0

    def load(self) -> AppState | None:
        return None

    def save(self, state: AppState) -> None:
        self.attempts += 1
        raise PersistenceFailure("storage unavailable")
