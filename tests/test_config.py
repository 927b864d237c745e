# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklane.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "APP_NAME",
        "LOG_LEVEL",
        "CONSOLE_ENABLED",
        "DATA_DIR",
        "STATE_PATH",
        "STATE_KEY",
        "DEFAULT_FILTER",
        "DEFAULT_VIEW_MODE",
        "DEFAULT_PRIORITY",
    ):
        monkeypatch.delenv(f"TASKLANE_{name}", raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    s = Settings.from_env()

    assert s.app_name == "tasklane"
    assert s.console_enabled is True
    assert s.data_dir == Path(".local/tasklane")
    assert s.state_path == Path(".local/tasklane/state.json")
    assert s.state_key == "tasklane-state"
    assert (s.default_filter, s.default_view_mode, s.default_priority) == ("all", "list", "P2")


def test_env_overrides(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("TASKLANE_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKLANE_CONSOLE_ENABLED", "no")
    clean_env.setenv("TASKLANE_DEFAULT_FILTER", " Today ")
    clean_env.setenv("TASKLANE_DEFAULT_PRIORITY", "p1")
    clean_env.setenv("TASKLANE_STATE_KEY", "   ")

    s = Settings.from_env()

    assert s.console_enabled is False
    assert s.state_path == tmp_path / "state.json"
    assert s.default_filter == "today"
    assert s.default_priority == "P1"
    assert s.state_key == "tasklane-state"
