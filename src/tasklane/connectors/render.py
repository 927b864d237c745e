# src/tasklane/connectors/render.py

"""Plain-text rendering of derived views for the console connector."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from ..core.state import FilterName
from ..tasks.task_models import Task
from ..views.derive import Bucket, Lane, calendar_day

SHORT_ID_LEN = 8


def short_id(task: Task) -> str:
    return task.id[:SHORT_ID_LEN]


def format_task(task: Task, now: datetime, *, show_status: bool = True) -> str:
    parts = [f"[{short_id(task)}]", task.priority.value, task.title]
    if task.due_date is not None:
        parts.append(f"(due {calendar_day(task.due_date, now).isoformat()})")
    if show_status:
        parts.append(f"- {task.status.heading}")
    line = " ".join(parts)
    if task.description:
        line += f"\n      {task.description}"
    return line


def render_view(buckets: Iterable[Bucket], now: datetime) -> str:
    lines: list[str] = []
    for bucket in buckets:
        lines.append(f"== {bucket.title} ({len(bucket.tasks)}) ==")
        if not bucket.tasks:
            lines.append("  (empty)")
        for task in bucket.tasks:
            lines.append("  " + format_task(task, now))
    return "\n".join(lines) if lines else "(no tasks)"


def render_board(lanes: Iterable[Lane], now: datetime) -> str:
    lines: list[str] = []
    for lane in lanes:
        lines.append(f"== {lane.title} ({len(lane.tasks)}) ==")
        if not lane.tasks:
            lines.append("  (empty)")
        for task in lane.tasks:
            lines.append("  " + format_task(task, now, show_status=False))
    return "\n".join(lines)


def render_counts(counts: Mapping[FilterName, int], active: FilterName) -> str:
    cells = []
    for name in FilterName:
        mark = "*" if name is active else " "
        cells.append(f"{mark}{name.value}: {counts.get(name, 0)}")
    return "  ".join(cells)
