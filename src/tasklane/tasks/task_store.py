# src/tasklane/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceFailure
from ..core.state import AppState, FilterName, ViewMode
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "tasklane-state"


# ---- snapshot codec ----


def _ts_to_str(value: datetime) -> str:
    return value.isoformat()


def _str_to_ts(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        return None


def task_to_dict(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "status": task.status.value,
        "createdAt": _ts_to_str(task.created_at),
    }
    if task.due_date is not None:
        out["dueDate"] = _ts_to_str(task.due_date)
    return out


def task_from_dict(raw: Any) -> Task | None:
    """Decode one stored task; None if the record lacks id, title or createdAt."""
    if not isinstance(raw, dict):
        return None
    task_id = raw.get("id")
    title = raw.get("title")
    if not isinstance(task_id, str) or not task_id:
        return None
    if not isinstance(title, str) or not title.strip():
        return None
    created_at = _str_to_ts(raw.get("createdAt"))
    if created_at is None:
        return None
    description = raw.get("description")
    return Task(
        id=task_id,
        title=title,
        description=description if isinstance(description, str) else "",
        priority=Priority.from_db(raw.get("priority")),
        status=TaskStatus.from_db(raw.get("status")),
        created_at=created_at,
        due_date=_str_to_ts(raw.get("dueDate")),
    )


def state_to_dict(state: AppState) -> dict[str, Any]:
    return {
        "tasks": [task_to_dict(t) for t in state.tasks],
        "viewMode": state.view_mode.value,
        "activeFilter": state.active_filter.value,
    }


def state_from_dict(data: Any) -> AppState | None:
    """
    Rebuild an AppState from a snapshot.

    Returns None when the snapshot itself is malformed. Bad task records are
    skipped (the rest of the state is still usable); duplicate ids keep the
    first occurrence so ids stay unique.
    """
    if not isinstance(data, dict):
        return None
    raw_tasks = data.get("tasks", [])
    if not isinstance(raw_tasks, list):
        return None

    tasks: list[Task] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_tasks):
        task = task_from_dict(raw)
        if task is None:
            logger.warning("Skipping malformed task record at index %d", i)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s at index %d", task.id, i)
            continue
        seen.add(task.id)
        tasks.append(task)

    try:
        view_mode = ViewMode(data.get("viewMode", ViewMode.LIST))
    except ValueError:
        view_mode = ViewMode.LIST
    try:
        active_filter = FilterName(data.get("activeFilter", FilterName.ALL))
    except ValueError:
        active_filter = FilterName.ALL

    return AppState(tasks=tuple(tasks), view_mode=view_mode, active_filter=active_filter)


# ---- durable slot ----


class JsonStateStore:
    """
    Key-value slot store backed by one JSON file.

    The file holds an object of named slots; this store owns exactly one of
    them (`key`) and leaves the others untouched. Writes go through a temp
    file + os.replace so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: str | Path = "state.json", key: str = DEFAULT_STATE_KEY) -> None:
        self._path = Path(path)
        self._key = key
        logger.info("JsonStateStore ready path=%s key=%s", self._path, self._key)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _read_slots(self) -> dict[str, Any]:
        """Whole file as a dict; undecodable or invalid JSON -> {}. OSError propagates."""
        if not self._path.exists():
            return {}
        raw = self._path.read_bytes()
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("State file %s is not valid UTF-8 JSON; ignoring its contents.", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_slots(self, slots: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(slots, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    # ---- public API ----

    def load(self) -> AppState | None:
        try:
            slots = self._read_slots()
        except OSError:
            logger.exception("Failed to read state slot %s from %s", self._key, self._path)
            return None

        if self._key not in slots:
            logger.debug("No state slot %s in %s", self._key, self._path)
            return None

        state = state_from_dict(slots[self._key])
        if state is None:
            logger.warning("State slot %s in %s is malformed; ignoring it.", self._key, self._path)
            return None

        logger.info("Loaded state: %d tasks from %s", len(state.tasks), self._path)
        return state

    def save(self, state: AppState) -> None:
        try:
            try:
                slots = self._read_slots()
            except OSError:
                slots = {}
            slots[self._key] = state_to_dict(state)
            self._write_slots(slots)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"could not write state slot {self._key} to {self._path}") from e
        logger.debug("Saved state: %d tasks to %s", len(state.tasks), self._path)
