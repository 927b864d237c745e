# src/tasklane/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from ..core.errors import InvalidTask


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values are stored verbatim in the state snapshot; keep them stable.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def heading(self) -> str:
        return _STATUS_HEADINGS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            return cls.TODO


_STATUS_HEADINGS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}


class Priority(StrEnum):
    """Four urgency ranks, P1 highest. Declaration order is the sort order."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"

    @property
    def rank(self) -> int:
        return int(self.value[1:])

    @property
    def label(self) -> str:
        return _PRIORITY_LABELS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return DEFAULT_PRIORITY
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            return DEFAULT_PRIORITY


_PRIORITY_LABELS = {
    Priority.P1: "Urgent",
    Priority.P2: "High",
    Priority.P3: "Medium",
    Priority.P4: "Low",
}

DEFAULT_PRIORITY = Priority.P2


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    created_at: datetime
    due_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """What a caller supplies to create a task; id and created_at are assigned on add."""

    title: str
    description: str = ""
    priority: Priority | str = DEFAULT_PRIORITY
    status: TaskStatus | str = TaskStatus.TODO
    due_date: datetime | None = None


def _coerce_priority(raw: Priority | str) -> Priority:
    try:
        return Priority(str(raw).strip().upper())
    except ValueError:
        raise InvalidTask(f"priority must be one of P1..P4, got {raw!r}") from None


def coerce_status(raw: TaskStatus | str) -> TaskStatus:
    try:
        return TaskStatus(str(raw).strip().upper())
    except ValueError:
        raise InvalidTask(f"unknown status {raw!r}") from None


def _clean_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title:
        raise InvalidTask("title is required")
    return title


def _check_due(raw: object) -> datetime | None:
    if raw is not None and not isinstance(raw, datetime):
        raise InvalidTask(f"due_date must be a datetime, got {type(raw).__name__}")
    return raw


def build_task(draft: TaskDraft, *, task_id: str, created_at: datetime) -> Task:
    """Validate a creation request and stamp it with identity and creation time."""
    return Task(
        id=task_id,
        title=_clean_title(draft.title),
        description=draft.description or "",
        priority=_coerce_priority(draft.priority),
        status=coerce_status(draft.status or TaskStatus.TODO),
        created_at=created_at,
        due_date=_check_due(draft.due_date),
    )


def validate_task(task: Task) -> Task:
    """Apply the creation rules to a full replacement record."""
    if not task.id:
        raise InvalidTask("id is required")
    return replace(
        task,
        title=_clean_title(task.title),
        description=task.description or "",
        priority=_coerce_priority(task.priority),
        status=coerce_status(task.status),
        due_date=_check_due(task.due_date),
    )
