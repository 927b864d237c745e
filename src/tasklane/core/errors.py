# src/tasklane/core/errors.py

from __future__ import annotations


class TaskLaneError(Exception):
    """Base class for errors raised by the task engine."""


class InvalidTask(TaskLaneError, ValueError):
    """A task record or creation request failed validation (e.g. empty title)."""


class InvalidFilter(TaskLaneError, ValueError):
    """A filter name outside the closed set of named filters."""

    def __init__(self, name: object) -> None:
        super().__init__(f"unknown filter: {name!r}")
        self.name = name


class PersistenceFailure(TaskLaneError, RuntimeError):
    """
    Reading or writing the durable state slot failed.

    Never surfaces as the failure of a task mutation: the engine logs it and
    keeps working on the in-memory state.
    """
