# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklane.cli.bootstrap import App
from tasklane.core.engine import TaskEngine

from .fakes import FixedClock, MemoryStateStore, SeqIds

# Mid-afternoon so that "today" has room on both sides of the clock.
NOW = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with App and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklane-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        state_path=tmp_path / "state.json",
        state_key="tasklane-state",
        default_filter="all",
        default_view_mode="list",
        default_priority="P2",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture()
def engine(store: MemoryStateStore, clock: FixedClock) -> TaskEngine:
    return TaskEngine(store, clock=clock, id_factory=SeqIds())


@pytest.fixture()
def app(settings: SimpleNamespace, engine: TaskEngine, clock: FixedClock) -> App:
    return App(settings=settings, engine=engine, clock=clock)
