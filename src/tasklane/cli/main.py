# src/tasklane/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the App (settings + engine restored from the
state file), then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_app
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    log_file = setup_logging(
        log_dir=settings.data_dir,
        app_name=settings.app_name,
        console_level=console_level,
    )

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    app = create_app(settings=settings)

    if not settings.console_enabled:
        logger.info("Console disabled; nothing to run.")
        return

    try:
        run_console_loop(app)
    finally:
        err = app.engine.last_persistence_error
        if err is not None:
            logger.warning("Exiting with unsaved changes: %s", err)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
