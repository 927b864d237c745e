# src/tasklane/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Loggers that fire on every dispatch; they belong in the file, not between REPL prompts.
_PER_ACTION_LOGGERS = (
    "tasklane.core.engine",
    "tasklane.tasks.task_store",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable:
    - tasklane logs pass, except per-action engine/store chatter below WARNING
    - captured Python warnings ('py.warnings') only at ERROR+
    - third-party loggers only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("tasklane."):
            if name.startswith(_PER_ACTION_LOGGERS):
                return record.levelno >= logging.WARNING
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklane",
    app_name: str = "tasklane",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Configure the root logger:
    - stderr handler, filtered for interactive use
    - rotating file handler `<log_dir>/<app_name>.log` with everything

    Call once from the entrypoint, before the first log call.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    # Every dispatch logs a line, so the file is capped.
    fh = RotatingFileHandler(
        str(log_file),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
