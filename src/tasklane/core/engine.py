# src/tasklane/core/engine.py

from __future__ import annotations

"""
Task state engine.

The single owner of the in-memory AppState:
- callers issue one of a small closed set of actions,
- a pure reducer computes the next state (or rejects the action),
- every accepted transition is written through the injected StateStore
  before dispatch() returns.

Persistence failures never fail an action: they are logged and kept on
`last_persistence_error`, and the engine keeps serving the in-memory state.
"""

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from ..tasks.task_models import (
    Task,
    TaskDraft,
    TaskStatus,
    build_task,
    coerce_status,
    validate_task,
)
from ..views.derive import GroupedView, Lane, board, derive, filter_counts
from .errors import PersistenceFailure
from .ports import Clock, IdFactory, StateStore, system_clock
from .state import AppState, FilterName, ViewMode, default_state

logger = logging.getLogger(__name__)


# ---- actions ----


@dataclass(frozen=True, slots=True)
class AddTask:
    draft: TaskDraft


@dataclass(frozen=True, slots=True)
class UpdateTask:
    task: Task


@dataclass(frozen=True, slots=True)
class DeleteTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class SetStatus:
    task_id: str
    status: TaskStatus | str


@dataclass(frozen=True, slots=True)
class ToggleViewMode:
    pass


@dataclass(frozen=True, slots=True)
class SetViewMode:
    mode: ViewMode | str


@dataclass(frozen=True, slots=True)
class SetFilter:
    name: FilterName | str


Action = AddTask | UpdateTask | DeleteTask | SetStatus | ToggleViewMode | SetViewMode | SetFilter


def new_task_id() -> str:
    return str(uuid.uuid4())


# ---- pure transition ----


def _replace_task(state: AppState, task_id: str, fn: Callable[[Task], Task]) -> AppState:
    if state.find(task_id) is None:
        logger.debug("No task with id=%s; action ignored.", task_id)
        return state
    tasks = tuple(fn(t) if t.id == task_id else t for t in state.tasks)
    return replace(state, tasks=tasks)


def reduce(
    state: AppState,
    action: Action,
    *,
    now: datetime,
    new_id: IdFactory = new_task_id,
) -> AppState:
    """
    Apply one action and return the next state.

    Raises InvalidTask / InvalidFilter / ValueError for rejected actions;
    the input state is never modified. Unknown task ids are no-ops.
    """
    if isinstance(action, AddTask):
        task_id = new_id()
        while state.find(task_id) is not None:
            task_id = new_id()
        task = build_task(action.draft, task_id=task_id, created_at=now)
        return replace(state, tasks=state.tasks + (task,))

    if isinstance(action, UpdateTask):
        incoming = validate_task(action.task)
        # created_at is set once at creation; a replacement record cannot move it.
        return _replace_task(
            state,
            incoming.id,
            lambda current: replace(incoming, created_at=current.created_at),
        )

    if isinstance(action, DeleteTask):
        if state.find(action.task_id) is None:
            logger.debug("No task with id=%s; delete ignored.", action.task_id)
            return state
        return replace(state, tasks=tuple(t for t in state.tasks if t.id != action.task_id))

    if isinstance(action, SetStatus):
        status = coerce_status(action.status)
        return _replace_task(state, action.task_id, lambda current: replace(current, status=status))

    if isinstance(action, ToggleViewMode):
        return replace(state, view_mode=state.view_mode.toggled())

    if isinstance(action, SetViewMode):
        return replace(state, view_mode=ViewMode(action.mode))

    if isinstance(action, SetFilter):
        return replace(state, active_filter=FilterName.parse(action.name))

    raise TypeError(f"unsupported action: {action!r}")


# ---- engine ----


class TaskEngine:
    """
    Serialized owner of AppState.

    Thread-safety:
    - dispatch() holds one lock for reduce + swap + save, so transitions never
      interleave and the durable copy is written in the same order as the
      in-memory states it describes.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        clock: Clock = system_clock,
        id_factory: IdFactory = new_task_id,
        initial: AppState | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._id_factory = id_factory
        self._state = initial if initial is not None else default_state()
        self._lock = threading.RLock()
        self.last_persistence_error: PersistenceFailure | None = None

    @classmethod
    def from_store(
        cls,
        store: StateStore,
        *,
        clock: Clock = system_clock,
        id_factory: IdFactory = new_task_id,
        default: AppState | None = None,
    ) -> TaskEngine:
        """Read the durable slot once; fall back to `default` (or an empty state)."""
        loaded = store.load()
        if loaded is None:
            logger.info("No usable saved state; starting empty.")
        return cls(
            store,
            clock=clock,
            id_factory=id_factory,
            initial=loaded if loaded is not None else default,
        )

    # ---- reads ----

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def get_task(self, task_id: str) -> Task | None:
        return self._state.find(task_id)

    def has_task(self, task_id: str) -> bool:
        return self._state.find(task_id) is not None

    def view(self, active_filter: FilterName | str | None = None) -> GroupedView:
        state = self._state
        flt = state.active_filter if active_filter is None else active_filter
        return derive(state.tasks, flt, now=self._clock())

    def board(self) -> tuple[Lane, ...]:
        return board(self._state.tasks)

    def counts(self) -> dict[FilterName, int]:
        return filter_counts(self._state.tasks, now=self._clock())

    # ---- writes ----

    def dispatch(self, action: Action) -> AppState:
        with self._lock:
            new_state = reduce(self._state, action, now=self._clock(), new_id=self._id_factory)
            self._state = new_state
            logger.debug("Applied %s (tasks=%d)", type(action).__name__, len(new_state.tasks))
            self._persist(new_state)
            return new_state

    def _persist(self, state: AppState) -> None:
        try:
            self._store.save(state)
        except PersistenceFailure as e:
            self.last_persistence_error = e
            logger.error("State not persisted, continuing in memory: %s", e, exc_info=True)
        else:
            self.last_persistence_error = None

    def add_task(self, draft: TaskDraft) -> Task:
        """Create a task and return it (with its assigned id and created_at)."""
        with self._lock:
            state = self.dispatch(AddTask(draft))
            return state.tasks[-1]

    def update_task(self, task: Task) -> AppState:
        return self.dispatch(UpdateTask(task))

    def delete_task(self, task_id: str) -> AppState:
        return self.dispatch(DeleteTask(task_id))

    def set_status(self, task_id: str, status: TaskStatus | str) -> AppState:
        return self.dispatch(SetStatus(task_id, status))

    def toggle_view_mode(self) -> AppState:
        return self.dispatch(ToggleViewMode())

    def set_view_mode(self, mode: ViewMode | str) -> AppState:
        return self.dispatch(SetViewMode(mode))

    def set_filter(self, name: FilterName | str) -> AppState:
        return self.dispatch(SetFilter(name))
