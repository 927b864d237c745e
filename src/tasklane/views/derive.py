# src/tasklane/views/derive.py

from __future__ import annotations

"""
View derivation.

Pure functions that turn the task collection into what the list and board
views display. Nothing here mutates its input or reads the clock itself:
`now` is passed in by the caller so a whole pass sees one consistent day.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from ..core.state import FilterName
from ..tasks.task_models import Priority, Task, TaskStatus

# Key names of the due-date buckets used by the "all" filter, in display order.
OVERDUE = "overdue"
TODAY = "today"
TOMORROW = "tomorrow"
THIS_WEEK = "this_week"
LATER = "later"
NO_DUE_DATE = "no_due_date"

_DUE_BUCKET_TITLES: dict[str, str] = {
    OVERDUE: "Overdue",
    TODAY: "Today",
    TOMORROW: "Tomorrow",
    THIS_WEEK: "This Week",
    LATER: "Later",
    NO_DUE_DATE: "No Due Date",
}

WEEK_DAYS = 7


@dataclass(frozen=True, slots=True)
class Bucket:
    key: str
    title: str
    tasks: tuple[Task, ...]


@dataclass(frozen=True, slots=True)
class Lane:
    status: TaskStatus
    title: str
    tasks: tuple[Task, ...]


GroupedView = tuple[Bucket, ...]


# ---- calendar helpers ----


def calendar_day(value: datetime, now: datetime) -> date:
    """Calendar day of `value` as seen from `now`'s time zone (time of day dropped)."""
    if value.tzinfo is not None and now.tzinfo is not None:
        value = value.astimezone(now.tzinfo)
    return value.date()


def is_due_today(task: Task, now: datetime) -> bool:
    return task.due_date is not None and calendar_day(task.due_date, now) == now.date()


def due_bucket(task: Task, now: datetime) -> str:
    if task.due_date is None:
        return NO_DUE_DATE
    delta = (calendar_day(task.due_date, now) - now.date()).days
    if delta < 0:
        return OVERDUE
    if delta == 0:
        return TODAY
    if delta == 1:
        return TOMORROW
    if delta <= WEEK_DAYS:
        return THIS_WEEK
    return LATER


# ---- ordering ----


def _timestamp(value: datetime) -> float:
    # Naive values are taken as local time, which is what datetime.timestamp() does.
    return value.timestamp()


def inbox_order(tasks: Sequence[Task]) -> tuple[Task, ...]:
    """Dated tasks first by ascending due date, then undated tasks newest first."""
    dated = sorted(
        (t for t in tasks if t.due_date is not None),
        key=lambda t: _timestamp(t.due_date),  # type: ignore[arg-type]
    )
    undated = sorted(
        (t for t in tasks if t.due_date is None),
        key=lambda t: _timestamp(t.created_at),
        reverse=True,
    )
    return tuple(dated + undated)


# ---- projections ----


def _derive_inbox(tasks: Sequence[Task], now: datetime) -> GroupedView:
    return (Bucket(FilterName.INBOX.value, "Inbox", inbox_order(tasks)),)


def _derive_today(tasks: Sequence[Task], now: datetime) -> GroupedView:
    todays = [t for t in tasks if is_due_today(t, now)]
    return (Bucket(FilterName.TODAY.value, "Today", inbox_order(todays)),)


def _derive_priority(tasks: Sequence[Task], now: datetime) -> GroupedView:
    buckets: list[Bucket] = []
    for prio in Priority:
        members = [t for t in tasks if t.priority == prio]
        if members:
            buckets.append(Bucket(prio.value, f"{prio.value} - {prio.label}", inbox_order(members)))
    return tuple(buckets)


def _derive_all(tasks: Sequence[Task], now: datetime) -> GroupedView:
    grouped: dict[str, list[Task]] = {key: [] for key in _DUE_BUCKET_TITLES}
    for task in tasks:
        grouped[due_bucket(task, now)].append(task)
    return tuple(
        Bucket(key, _DUE_BUCKET_TITLES[key], inbox_order(members))
        for key, members in grouped.items()
        if members
    )


_DERIVERS = {
    FilterName.INBOX: _derive_inbox,
    FilterName.TODAY: _derive_today,
    FilterName.PRIORITY: _derive_priority,
    FilterName.ALL: _derive_all,
}


def derive(
    tasks: Sequence[Task],
    active_filter: FilterName | str,
    *,
    now: datetime,
) -> GroupedView:
    """
    Group and sort `tasks` for the given filter.

    - inbox: one bucket, dated tasks by due date then undated newest first
    - today: one bucket, only tasks due on now's calendar day
    - priority: P1..P4 buckets, empty ones omitted
    - all: Overdue / Today / Tomorrow / This Week / Later / No Due Date,
      empty ones omitted

    Raises InvalidFilter for a name outside the closed set.
    """
    flt = FilterName.parse(active_filter)
    return _DERIVERS[flt](tuple(tasks), now)


def board(tasks: Sequence[Task]) -> tuple[Lane, ...]:
    """Three fixed lanes in lifecycle order; tasks keep collection order."""
    return tuple(
        Lane(status, status.heading, tuple(t for t in tasks if t.status == status))
        for status in TaskStatus
    )


def filter_counts(tasks: Sequence[Task], *, now: datetime) -> dict[FilterName, int]:
    """Badge counts for the sidebar filters."""
    total = len(tasks)
    return {
        FilterName.INBOX: total,
        FilterName.TODAY: sum(1 for t in tasks if is_due_today(t, now)),
        FilterName.PRIORITY: total,
        FilterName.ALL: total,
    }


def flatten(view: GroupedView) -> tuple[Task, ...]:
    """All tasks of a grouped view in display order."""
    return tuple(t for bucket in view for t in bucket.tasks)
