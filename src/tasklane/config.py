# src/tasklane/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from disk at import time except the optional .env file.
- Defaults keep all local data under a gitignored `.local/` directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKLANE"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    state_path: Path
    state_key: str

    # ---- Defaults for a fresh state ----
    default_filter: str
    default_view_mode: str
    default_priority: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklane").strip() or "tasklane"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasklane"))
        state_path = _env_path(_k("STATE_PATH"), data_dir / "state.json")
        state_key = _env(_k("STATE_KEY"), "tasklane-state").strip() or "tasklane-state"

        # Validated lazily by the engine/bootstrap; unknown values fall back there.
        default_filter = _env(_k("DEFAULT_FILTER"), "all").strip().lower()
        default_view_mode = _env(_k("DEFAULT_VIEW_MODE"), "list").strip().lower()
        default_priority = _env(_k("DEFAULT_PRIORITY"), "P2").strip().upper()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            state_path=state_path,
            state_key=state_key,
            default_filter=default_filter,
            default_view_mode=default_view_mode,
            default_priority=default_priority,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
