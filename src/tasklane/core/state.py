# src/tasklane/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import Task
from .errors import InvalidFilter


class ViewMode(StrEnum):
    LIST = "list"
    BOARD = "board"

    def toggled(self) -> ViewMode:
        return ViewMode.BOARD if self is ViewMode.LIST else ViewMode.LIST


class FilterName(StrEnum):
    """Closed set of named filters shown in the sidebar."""

    INBOX = "inbox"
    TODAY = "today"
    PRIORITY = "priority"
    ALL = "all"

    @classmethod
    def parse(cls, raw: object) -> FilterName:
        if isinstance(raw, FilterName):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        raise InvalidFilter(raw)


@dataclass(frozen=True, slots=True)
class AppState:
    """
    The whole in-memory state.

    `tasks` is kept in insertion order; display order is always derived
    (see views.derive).
    """

    tasks: tuple[Task, ...] = ()
    view_mode: ViewMode = ViewMode.LIST
    active_filter: FilterName = FilterName.ALL

    def find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def default_state(
    *,
    view_mode: ViewMode | str = ViewMode.LIST,
    active_filter: FilterName | str = FilterName.ALL,
) -> AppState:
    """Fresh empty state; unknown defaults fall back to list/all."""
    try:
        mode = ViewMode(view_mode)
    except ValueError:
        mode = ViewMode.LIST
    try:
        flt = FilterName.parse(active_filter)
    except InvalidFilter:
        flt = FilterName.ALL
    return AppState(tasks=(), view_mode=mode, active_filter=flt)
