# src/weekly_todo/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import cast

from ..checklist.models import Task
from ..checklist.view import ChecklistSnapshot, build_snapshot, move_id
from ..checklist.week import DAY_NAMES
from ..core.errors import InvalidInput
from ..core.state import AppState
from ..links.resolver import dispatch

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

LINK_FLAG = "--link"
ALL_DONE_MESSAGE = "🎉 All done for this week!"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def render_snapshot(snapshot: ChecklistSnapshot) -> str:
    lines = [f"Week {snapshot.week_number} · {snapshot.progress_text}"]
    if not snapshot.rows:
        lines.append("  No to-dos yet. Add one with /add <text>.")
        return "\n".join(lines)
    for row in snapshot.rows:
        mark = "x" if row.checked else " "
        link = f" {row.icon}" if row.has_link else ""
        lines.append(f"  {row.position:>2}. [{mark}] {row.task.text}{link}")
    return "\n".join(lines)


def _task_at(state: AppState, token: str) -> Task | None:
    """Resolve a 1-based list position (or a raw task id) to a task."""
    tasks = state.store.get_tasks()
    if token.isdigit():
        index = int(token) - 1
        return tasks[index] if 0 <= index < len(tasks) else None
    for task in tasks:
        if task.id == token:
            return task
    return None


def _split_link_args(
    state: AppState, args: list[str]
) -> tuple[list[str], str | None, dict[str, str] | None]:
    """
    Split "words... --link <type> key=value ..." into parts.

    Raises InvalidInput for an unknown type, a malformed pair, an unknown
    field or a missing required field.
    """
    if LINK_FLAG not in args:
        return args, None, None

    at = args.index(LINK_FLAG)
    words, rest = args[:at], args[at + 1 :]
    if not rest:
        raise InvalidInput(f"{LINK_FLAG} needs a link type. Use /types to list them.")

    link_type = rest[0].lower()
    if not state.links.is_known(link_type):
        raise InvalidInput(f"Unknown link type: {rest[0]}. Use /types to list them.")

    fields = {f.key: f for f in state.links.fields(link_type)}
    link_data: dict[str, str] = {}
    for pair in rest[1:]:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidInput(f"Expected key=value, got: {pair}")
        if key not in fields:
            allowed = ", ".join(fields) or "none"
            raise InvalidInput(f"Unknown field for {link_type}: {key} (allowed: {allowed}).")
        link_data[key] = value.strip()

    for f in fields.values():
        if f.required and not link_data.get(f.key):
            raise InvalidInput(f"{link_type} link needs {f.key}=... ({f.label}).")

    return words, link_type, link_data


def _parse_day(token: str) -> int | None:
    if token.isdigit():
        day = int(token)
        return day if 0 <= day <= 6 else None
    lowered = token.lower()
    for index, name in enumerate(DAY_NAMES):
        if name.lower().startswith(lowered) and len(lowered) >= 2:
            return index
    return None


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_snapshot(build_snapshot(state.store, state.links))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Call mom
    /add Call mom --link whatsapp phone="+1 555-0100" message=hi
    """
    try:
        words, link_type, link_data = _split_link_args(state, args)
        task = state.store.add_task(" ".join(words), link_type or "none", link_data or {})
    except InvalidInput as e:
        return f"Cannot add: {e}"
    if task is None:
        return "Failed to save the new to-do."
    return f"Added #{task.order + 1}: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit 2 New text
    /edit 2 --link email email=me@example.com subject=Hi
    /edit 2 --link none
    """
    if not args:
        return "Usage: /edit <n> [new text] [--link <type> key=value ...]"
    task = _task_at(state, args[0])
    if task is None:
        return f"No to-do at {args[0]}."
    try:
        words, link_type, link_data = _split_link_args(state, args[1:])
        updated = state.store.update_task(
            task.id,
            text=" ".join(words) if words else None,
            link_type=link_type,
            link_data=link_data,
        )
    except InvalidInput as e:
        return f"Cannot edit: {e}"
    if updated is None:
        return "Failed to update the to-do (it may have been removed). Use /list to refresh."
    return f"Updated #{updated.order + 1}: {updated.text}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <n>"
    task = _task_at(state, args[0])
    if task is None:
        return f"No to-do at {args[0]}."
    if not state.store.delete_task(task.id):
        return "Failed to delete the to-do. Use /list to refresh."
    return f"Deleted: {task.text}"


def cmd_check(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /check <n>"
    task = _task_at(state, args[0])
    if task is None:
        return f"No to-do at {args[0]}."
    now_checked = state.store.toggle_checked(task.id)
    snapshot = build_snapshot(state.store, state.links)
    if now_checked and snapshot.all_complete and emit is not None:
        emit(ALL_DONE_MESSAGE)
    state_text = "done" if now_checked else "not done"
    return f"#{task.order + 1} {task.text}: {state_text} ({snapshot.progress_text})"


def cmd_open(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /open <n>"
    task = _task_at(state, args[0])
    if task is None:
        return f"No to-do at {args[0]}."
    if not task.has_link:
        return f"{task.text} has no link."
    url = state.links.resolve(task.link_type, task.link_data)
    if not url:
        label = state.links.describe(task.link_type).label
        return f"{label} link for {task.text} is incomplete. Use /edit to fill it in."
    if not dispatch(url, state.opener):
        return f"Could not open {url}"
    return f"Opened {state.links.describe(task.link_type).label}: {url}"


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) != 2 or not all(a.isdigit() for a in args):
        return "Usage: /move <from> <to>"
    ids = [t.id for t in state.store.get_tasks()]
    src, dst = int(args[0]) - 1, int(args[1]) - 1
    try:
        new_order = move_id(ids, src, dst)
    except IndexError:
        return f"No to-do at {args[0]}."
    if not state.store.reorder_tasks(new_order):
        return "Failed to save the new order."
    return cmd_list(state, [])


def cmd_reset(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in ("yes", "y", "confirm"):
        return "Reset all checkmarks for this week? Type /reset yes to confirm."
    if not state.store.manual_reset():
        return "Failed to reset the week."
    return "Week reset! Start fresh. 💪"


def cmd_resetday(state: AppState, args: list[str]) -> str:
    if not args:
        day = state.store.get_settings().reset_day
        return f"Reset day: {DAY_NAMES[day]} ({day}). Use /resetday <0-6|name> to change."
    day = _parse_day(args[0])
    if day is None:
        return "Reset day must be 0-6 (0=Sunday) or a day name."
    try:
        prefs = state.store.update_settings(reset_day=day)
    except InvalidInput as e:
        return f"Cannot update settings: {e}"
    if prefs.reset_day != day:
        return "Failed to save settings."
    return f"Reset day set to {DAY_NAMES[day]}."


def backup_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"weekly-todo-backup-{today.isoformat()}.json"


def cmd_export(state: AppState, args: list[str]) -> str:
    path = Path(args[0]).expanduser() if args else Path(backup_filename())
    payload = state.store.export_snapshot()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, "utf-8")
    except OSError:
        logger.exception("Failed to write export to %s", path)
        return f"Failed to export to {path}."
    return f"Data exported to {path} 📦"


def cmd_import(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /import <path>"
    path = Path(args[0]).expanduser()
    try:
        payload = path.read_text("utf-8")
    except (OSError, UnicodeDecodeError):
        logger.exception("Failed to read import file %s", path)
        return f"Cannot read {path}."
    if not state.store.import_snapshot(payload):
        return "Failed to import data. Invalid file format."
    return "Data imported successfully! 🎉\n" + cmd_list(state, [])


def cmd_week(state: AppState, args: list[str]) -> str:
    snapshot = build_snapshot(state.store, state.links)
    return f"Week {snapshot.week_number} ({snapshot.week_id}): {snapshot.progress_text}"


def cmd_types(state: AppState, args: list[str]) -> str:
    lines = ["Link types:"]
    for lt in state.links.link_types():
        fields = " ".join(f"{f.key}=...{'' if f.required else '?'}" for f in lt.fields)
        lines.append(f"  {lt.icon} {lt.name} - {lt.label}" + (f" ({fields})" if fields else ""))
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show this week's to-dos.", aliases=["ls", "l"])
registry.register(
    "add", cmd_add, help_text="Add a to-do: /add <text> [--link <type> key=value ...]."
)
registry.register(
    "edit", cmd_edit, help_text="Edit a to-do: /edit <n> [text] [--link <type> key=value ...]."
)
registry.register("delete", cmd_delete, help_text="Delete a to-do: /delete <n>.", aliases=["rm", "del"])
registry.register(
    "check", cmd_check, help_text="Toggle done for this week: /check <n>.", aliases=["done", "x"]
)
registry.register("open", cmd_open, help_text="Open a to-do's link: /open <n>.", aliases=["go"])
registry.register("move", cmd_move, help_text="Reorder: /move <from> <to>.", aliases=["mv"])
registry.register("reset", cmd_reset, help_text="Clear all checkmarks: /reset yes.")
registry.register("resetday", cmd_resetday, help_text="Show/set reset day: /resetday [0-6|name].")
registry.register("export", cmd_export, help_text="Export a JSON backup: /export [path].")
registry.register("import", cmd_import, help_text="Import a JSON backup: /import <path>.")
registry.register("week", cmd_week, help_text="Show the current ISO week and progress.")
registry.register("types", cmd_types, help_text="List link types and their fields.")
