# src/tasklane/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on Protocols instead of concrete implementations.
This keeps storage and time sources swappable and makes testing easier.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .state import AppState


class StateStore(Protocol):
    """
    Durable copy of the AppState (one named slot).

    - load() returns None when the slot is absent or malformed.
    - save() raises PersistenceFailure when the write did not happen.
    """

    def load(self) -> AppState | None: ...
    def save(self, state: AppState) -> None: ...


class Clock(Protocol):
    """Current time source; read once per transition / derivation pass."""

    def __call__(self) -> datetime: ...


class IdFactory(Protocol):
    def __call__(self) -> str: ...


def system_clock() -> datetime:
    """Local wall-clock time as an aware datetime."""
    return datetime.now().astimezone()
