# src/tasklane/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the JSON state store and the system clock into a TaskEngine,
- restores the saved state (or starts from the configured defaults).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import Settings, get_settings
from ..core.engine import TaskEngine
from ..core.ports import Clock, system_clock
from ..core.state import default_state
from ..tasks.task_models import DEFAULT_PRIORITY, Priority
from ..tasks.task_store import JsonStateStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class App:
    """What connectors and command handlers get: settings + the engine."""

    settings: Settings
    engine: TaskEngine
    clock: Clock = system_clock

    @property
    def default_priority(self) -> Priority:
        return Priority.from_db(getattr(self.settings, "default_priority", DEFAULT_PRIORITY))


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.state_path.parent.mkdir(parents=True, exist_ok=True)


def create_app(*, settings=None, clock: Clock = system_clock) -> App:
    """
    Build App from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = JsonStateStore(settings.state_path, settings.state_key)
    engine = TaskEngine.from_store(
        store,
        clock=clock,
        default=default_state(
            view_mode=settings.default_view_mode,
            active_filter=settings.default_filter,
        ),
    )
    logger.info(
        "Engine ready: %d tasks, view=%s, filter=%s",
        len(engine.state.tasks),
        engine.state.view_mode,
        engine.state.active_filter,
    )
    return App(settings=settings, engine=engine, clock=clock)
