# tests/test_task_store.py

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from tasklane.core.engine import TaskEngine
from tasklane.core.errors import PersistenceFailure
from tasklane.core.state import AppState, FilterName, ViewMode
from tasklane.tasks.task_models import Priority, Task, TaskDraft, TaskStatus
from tasklane.tasks.task_store import JsonStateStore, state_from_dict, state_to_dict

from .conftest import NOW
from .fakes import FixedClock, SeqIds


def _state() -> AppState:
    return AppState(
        tasks=(
            Task(
                id="a",
                title="Write spec",
                description="first draft",
                priority=Priority.P1,
                status=TaskStatus.IN_PROGRESS,
                created_at=NOW,
                due_date=NOW + timedelta(days=1),
            ),
            Task(
                id="b",
                title="Read mail",
                description="",
                priority=Priority.P4,
                status=TaskStatus.TODO,
                created_at=NOW + timedelta(minutes=5),
            ),
        ),
        view_mode=ViewMode.BOARD,
        active_filter=FilterName.PRIORITY,
    )


def test_snapshot_layout() -> None:
    data = state_to_dict(_state())

    assert data["viewMode"] == "board"
    assert data["activeFilter"] == "priority"
    first, second = data["tasks"]
    assert first["createdAt"] == NOW.isoformat()
    assert first["dueDate"] == (NOW + timedelta(days=1)).isoformat()
    assert first["priority"] == "P1"
    assert first["status"] == "IN_PROGRESS"
    assert "dueDate" not in second
    # JSON-serializable as-is
    json.dumps(data)


def test_save_then_load_restores_datetimes(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path / "state.json", "slot")
    state = _state()

    store.save(state)
    loaded = store.load()

    assert loaded == state
    assert isinstance(loaded.tasks[0].created_at, datetime)
    assert isinstance(loaded.tasks[0].due_date, datetime)
    assert loaded.tasks[1].due_date is None


def test_save_of_load_is_a_fixed_point(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    store = JsonStateStore(path, "slot")

    store.save(_state())
    first = json.loads(path.read_text("utf-8"))
    store.save(store.load())
    second = json.loads(path.read_text("utf-8"))

    assert first == second


def test_load_missing_file_or_slot_returns_none(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    assert JsonStateStore(path, "slot").load() is None

    JsonStateStore(path, "other").save(_state())
    assert JsonStateStore(path, "slot").load() is None


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps(["a", "list"]),
        json.dumps({"slot": "text"}),
        json.dumps({"slot": {"tasks": "nope"}}),
    ],
)
def test_load_malformed_returns_none(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, "utf-8")
    assert JsonStateStore(path, "slot").load() is None


@pytest.mark.parametrize("content", [b'{"slot": "\xff"}', b"\xff\xfe garbage"])
def test_load_undecodable_file_returns_none(tmp_path: Path, content: bytes) -> None:
    path = tmp_path / "state.json"
    path.write_bytes(content)
    assert JsonStateStore(path, "slot").load() is None


def test_save_replaces_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_bytes(b"\xff\xfe garbage")
    store = JsonStateStore(path, "slot")

    store.save(_state())

    assert store.load() == _state()
    assert not (tmp_path / "state.json.tmp").exists()


def test_engine_starts_and_saves_over_undecodable_file(tmp_path: Path, clock: FixedClock) -> None:
    path = tmp_path / "state.json"
    path.write_bytes(b'{"slot": "\xff\xfe"}')

    engine = TaskEngine.from_store(JsonStateStore(path, "slot"), clock=clock, id_factory=SeqIds())
    engine.add_task(TaskDraft(title="x"))

    assert engine.last_persistence_error is None
    assert JsonStateStore(path, "slot").load() == engine.state


def test_bad_records_are_skipped_and_ids_stay_unique() -> None:
    data = state_to_dict(_state())
    data["tasks"].append({"id": "c", "title": "no created"})
    data["tasks"].append({"id": "a", "title": "dup", "createdAt": NOW.isoformat()})
    data["tasks"].append("garbage")
    data["tasks"][1]["status"] = "ARCHIVED"

    state = state_from_dict(data)

    assert state is not None
    assert [t.id for t in state.tasks] == ["a", "b"]
    assert state.tasks[0].title == "Write spec"
    assert state.tasks[1].status is TaskStatus.TODO


def test_unknown_view_mode_and_filter_fall_back() -> None:
    state = state_from_dict({"tasks": [], "viewMode": "kanban", "activeFilter": "bogus"})
    assert state == AppState()


def test_naive_and_utc_suffix_timestamps_are_parsed() -> None:
    state = state_from_dict(
        {
            "tasks": [
                {"id": "a", "title": "x", "createdAt": "2026-10-18T09:00:00.000Z"},
                {"id": "b", "title": "y", "createdAt": "2026-10-18T09:00:00", "dueDate": "2026-10-20"},
            ]
        }
    )

    assert state is not None
    assert state.tasks[0].created_at == datetime(2026, 10, 18, 9, tzinfo=timezone.utc)
    assert state.tasks[1].due_date == datetime(2026, 10, 20)


def test_save_keeps_other_slots(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"theme": {"dark": True}}), "utf-8")

    JsonStateStore(path, "slot").save(_state())

    data = json.loads(path.read_text("utf-8"))
    assert data["theme"] == {"dark": True}
    assert "slot" in data


def test_save_failure_raises_persistence_failure(tmp_path: Path) -> None:
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    (blocked / "keep").write_text("x", "utf-8")

    with pytest.raises(PersistenceFailure):
        JsonStateStore(blocked, "slot").save(_state())

    assert not (tmp_path / "blocked.tmp").exists()
    assert (blocked / "keep").read_text("utf-8") == "x"
