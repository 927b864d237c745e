# src/tasklane/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.bootstrap import App
from ..cli.commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(app: App, line: str) -> str | None:
    """
    One REPL step: slash commands go to the registry, plain text is a quick add.
    Returns the reply to print (None for blank input).
    """
    line = line.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = "/add " + line
    return command_registry.handle(app, line)


def run_console_loop(app: App) -> None:
    logger.info("Console connector started (tasks=%d).", len(app.engine.state.tasks))
    _print_ts(
        f"[{app.settings.app_name}] Type a title to add a task. "
        "Use /help for commands. Use /exit to quit.\n"
    )
    print(command_registry.handle(app, "/show"))

    while True:
        try:
            user_input = input("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(app, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
