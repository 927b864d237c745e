# src/tasklane/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from ..connectors.render import render_board, render_counts, render_view, short_id
from ..core.errors import TaskLaneError
from ..core.state import FilterName, ViewMode
from ..tasks.task_models import Task, TaskDraft, TaskStatus
from .bootstrap import App

CommandHandler = Callable[[App, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, app: App, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Rejected engine actions (empty title, unknown filter, ...) come back
        as a reply; the state is unchanged in that case.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(app, args)
        except (TaskLaneError, ValueError) as e:
            logger.info("Command /%s rejected: %s", name, e)
            return f"Rejected: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


STATUS_ALIASES = {
    "t": TaskStatus.TODO,
    "todo": TaskStatus.TODO,
    "ip": TaskStatus.IN_PROGRESS,
    "doing": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "in_progress": TaskStatus.IN_PROGRESS,
    "d": TaskStatus.DONE,
    "done": TaskStatus.DONE,
}


# ---- argument helpers ----


def parse_due(raw: str, now: datetime) -> datetime | None:
    """
    Parse a due date argument.

    Accepts YYYY-MM-DD (or any ISO-8601 datetime), "today", "tomorrow",
    and "none"/"-" to clear. Date-only values become local midnight.
    """
    text = raw.strip().lower()
    if text in ("none", "-", ""):
        return None
    if text == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if text == "tomorrow":
        return now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
    try:
        value = datetime.fromisoformat(raw.strip())
    except ValueError:
        raise ValueError(f"bad due date {raw!r}; use YYYY-MM-DD, today, tomorrow or none") from None
    return value if value.tzinfo is not None else value.astimezone()


def parse_status(raw: str) -> TaskStatus:
    status = STATUS_ALIASES.get(raw.strip().lower())
    if status is None:
        raise ValueError(f"unknown status {raw!r}; use todo, ip or done")
    return status


def resolve_task(app: App, token: str) -> Task:
    """Find a task by full id or unique id prefix."""
    token = token.strip()
    if not token:
        raise ValueError("task id is required")
    exact = app.engine.get_task(token)
    if exact is not None:
        return exact
    matches = [t for t in app.engine.state.tasks if t.id.startswith(token)]
    if not matches:
        raise ValueError(f"no task matches id {token!r}")
    if len(matches) > 1:
        raise ValueError(f"id prefix {token!r} is ambiguous ({len(matches)} tasks)")
    return matches[0]


def _split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    words: list[str] = []
    opts: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition(":")
        if sep and key.lower() in ("p", "prio", "due") and value:
            opts["p" if key.lower() in ("p", "prio") else "due"] = value
        else:
            words.append(arg)
    return words, opts


# ---- handlers ----


def cmd_help(app: App, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(app: App, args: list[str]) -> str:
    """
    /add Buy milk p:P1 due:2026-10-20
    Plain words form the title; p: and due: are optional.
    """
    words, opts = _split_options(args)
    draft = TaskDraft(
        title=" ".join(words),
        priority=opts.get("p", app.default_priority),
        due_date=parse_due(opts["due"], app.clock()) if "due" in opts else None,
    )
    task = app.engine.add_task(draft)
    return f"Added [{short_id(task)}] {task.title} ({task.priority.value})."


def _update(app: App, task: Task) -> str:
    app.engine.update_task(task)
    stored = app.engine.get_task(task.id) or task
    return f"Updated [{short_id(stored)}] {stored.title}."


def cmd_edit(app: App, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <new title>"
    task = resolve_task(app, args[0])
    return _update(app, replace(task, title=" ".join(args[1:])))


def cmd_desc(app: App, args: list[str]) -> str:
    if not args:
        return "Usage: /desc <id> [text]  (no text clears the description)"
    task = resolve_task(app, args[0])
    return _update(app, replace(task, description=" ".join(args[1:])))


def cmd_due(app: App, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /due <id> <YYYY-MM-DD|today|tomorrow|none>"
    task = resolve_task(app, args[0])
    return _update(app, replace(task, due_date=parse_due(args[1], app.clock())))


def cmd_prio(app: App, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /prio <id> <P1|P2|P3|P4>"
    task = resolve_task(app, args[0])
    # validated (and coerced to Priority) by the engine
    return _update(app, replace(task, priority=args[1]))  # type: ignore[arg-type]


def cmd_move(app: App, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /move <id> <todo|ip|done>"
    task = resolve_task(app, args[0])
    status = parse_status(args[1])
    app.engine.set_status(task.id, status)
    return f'Task [{short_id(task)}] moved to "{status.heading}".'


def cmd_delete(app: App, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /del <id>"
    task = resolve_task(app, args[0])
    app.engine.delete_task(task.id)
    return f"Deleted [{short_id(task)}] {task.title}."


def cmd_list(app: App, args: list[str]) -> str:
    """/list [filter] -> show the active filter (or peek at another one without switching)."""
    flt = FilterName.parse(args[0]) if args else app.engine.state.active_filter
    return render_view(app.engine.view(flt), app.clock())


def cmd_board(app: App, args: list[str]) -> str:
    return render_board(app.engine.board(), app.clock())


def cmd_show(app: App, args: list[str]) -> str:
    """Render whatever the current view mode says."""
    if app.engine.state.view_mode is ViewMode.BOARD:
        return cmd_board(app, args)
    return cmd_list(app, [])


def cmd_view(app: App, args: list[str]) -> str:
    """
    /view        -> toggle list/board
    /view list   -> list mode
    /view board  -> board mode
    """
    if not args:
        state = app.engine.toggle_view_mode()
    else:
        state = app.engine.set_view_mode(args[0].lower())
    return f"View mode: {state.view_mode.value}."


def cmd_filter(app: App, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /filter <" + "|".join(f.value for f in FilterName) + ">"
    state = app.engine.set_filter(args[0])
    return f"Filter: {state.active_filter.value}."


def cmd_status(app: App, args: list[str]) -> str:
    state = app.engine.state
    err = app.engine.last_persistence_error
    saved = "OK" if err is None else f"NOT SAVED ({err})"
    return (
        "Status:\n"
        f"  Tasks: {len(state.tasks)}\n"
        f"  View mode: {state.view_mode.value}\n"
        f"  Filters: {render_counts(app.engine.counts(), state.active_filter)}\n"
        f"  Storage: {saved}"
    )


def cmd_reset(app: App, args: list[str]) -> str:
    if args != ["yes"]:
        return "This deletes every task. Confirm with: /reset yes"
    with app.engine.lock:
        ids = [t.id for t in app.engine.state.tasks]
        for task_id in ids:
            app.engine.delete_task(task_id)
    return f"Deleted {len(ids)} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [p:P1..P4] [due:YYYY-MM-DD].", aliases=["a"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <id> <title>.", aliases=["e"])
registry.register("desc", cmd_desc, help_text="Set description: /desc <id> [text].")
registry.register("due", cmd_due, help_text="Set due date: /due <id> <YYYY-MM-DD|today|tomorrow|none>.")
registry.register("prio", cmd_prio, help_text="Set priority: /prio <id> <P1..P4>.")
registry.register("move", cmd_move, help_text="Change status: /move <id> <todo|ip|done>.", aliases=["mv"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("list", cmd_list, help_text="Show tasks for the active filter: /list [filter].", aliases=["ls"])
registry.register("board", cmd_board, help_text="Show the status board.")
registry.register("show", cmd_show, help_text="Show tasks in the current view mode.")
registry.register("view", cmd_view, help_text="Toggle or set view mode: /view [list|board].")
registry.register("filter", cmd_filter, help_text="Set filter: /filter <inbox|today|priority|all>.", aliases=["f"])
registry.register("status", cmd_status, help_text="Show counts, view mode and storage status.")
registry.register("reset", cmd_reset, help_text="Delete all tasks: /reset yes.")
