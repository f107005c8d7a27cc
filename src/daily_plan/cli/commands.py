# src/daily_plan/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date, datetime, time
from typing import cast

from ..core.state import AppState
from ..tasks.errors import PersistenceError, ValidationError
from ..tasks.task_models import (
    OTHER_CATEGORY,
    SUGGESTED_CATEGORIES,
    Priority,
    Task,
    TaskDraft,
)
from ..tasks.task_views import CategoryGroup

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
TASK_FIELDS_USAGE = "title | category | YYYY-MM-DD | HH:MM | low/medium/high"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        raw_args: bool = False,
    ) -> None:
        """
        raw_args=True hands the handler the rest of the line untouched, as a
        single-element list (or [] when empty), instead of whitespace-split words.
        """
        aliases = aliases or []
        keys = [name.lower(), *(a.lower() for a in aliases)]
        for key in keys:
            self._handlers[key] = handler
            if raw_args:
                self._raw.add(key)
        self._help[keys[0]] = help_text

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

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        if name in self._raw:
            args = [rest] if rest else []
        else:
            args = rest.split()

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


# ---- parsing / rendering helpers ----


def _split_fields(raw: str) -> list[str]:
    return [p.strip() for p in raw.split(FIELD_SEPARATOR)]


def apply_fields(draft: TaskDraft, fields: list[str]) -> TaskDraft:
    """
    Overlay "title | category | date | time | priority" onto a draft.

    Empty or missing fields keep the draft's value. A category outside the
    suggested set becomes a custom ("Other") category.
    """
    fields = fields + [""] * (5 - len(fields))
    title, category, day, at, priority = fields[:5]

    if title:
        draft.title = title

    if category:
        match = next((c for c in SUGGESTED_CATEGORIES if c.lower() == category.lower()), None)
        if match is not None:
            draft.category, draft.custom_category = match, ""
        elif category.lower() == OTHER_CATEGORY.lower():
            draft.category, draft.custom_category = OTHER_CATEGORY, ""
        else:
            draft.category, draft.custom_category = OTHER_CATEGORY, category

    if day:
        draft.start_date = date.fromisoformat(day)

    if at:
        draft.start_time = time.fromisoformat(at)

    if priority:
        try:
            draft.priority = Priority(priority.lower())
        except ValueError as e:
            raise ValueError(f"unknown priority {priority!r}") from e

    return draft


def _format_task(task: Task) -> str:
    when = task.start_date.strftime("%Y-%m-%d %H:%M")
    return f"  [{task.short_id}] {task.title}  {when}  ({task.priority.value})"


def _format_groups(title: str, groups: list[CategoryGroup], empty: str) -> str:
    if not groups:
        return empty
    lines = [title]
    for group in groups:
        lines.append(f"{group.category}:")
        lines.extend(_format_task(t) for t in group.tasks)
    return "\n".join(lines)


def _resolve(state: AppState, args: list[str], usage: str) -> Task | str:
    if not args:
        return usage
    task = state.controller.find(args[0])
    if task is None:
        return f"No task matches id {args[0]!r} (use /list or /archived to see ids)."
    return task


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    active = len(state.controller.active_tasks())
    archived = len(state.controller.archived_tasks())
    notif = "ON" if state.notifications_authorized else "OFF (permission not granted)"
    return (
        "Status:\n"
        f"  Tasks: {active} active, {archived} archived\n"
        f"  Notifications: {notif}\n"
        f"  Pending notifications: {len(state.coordinator.pending_ids())}\n"
        f"  Data dir: {getattr(settings, 'data_dir', '?')}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return _format_groups("Your Tasks", state.controller.active_groups(), "No tasks yet. Add one with /add.")


def cmd_archived(state: AppState, args: list[str]) -> str:
    return _format_groups("Archived Tasks", state.controller.archived_groups(), "No archived tasks.")


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add title | category | YYYY-MM-DD | HH:MM | priority
    Only the title is required; the rest defaults to General / now / low.
    """
    if not args:
        return f"Usage: /add {TASK_FIELDS_USAGE}"

    try:
        draft = apply_fields(TaskDraft.blank(), _split_fields(args[0]))
    except ValueError as e:
        return f"Cannot parse task: {e}. Usage: /add {TASK_FIELDS_USAGE}"

    try:
        task = state.controller.create(draft)
    except ValidationError as e:
        return f"Cannot save task: {e}."
    except PersistenceError:
        return "Could not save the task (see log for details)."

    return f"Added [{task.short_id}] {task.title} in {task.category} at {task.start_date:%Y-%m-%d %H:%M}."


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> title | category | YYYY-MM-DD | HH:MM | priority
    Empty fields keep their current value.
    """
    parts = args[0].split(maxsplit=1) if args else []
    resolved = _resolve(state, parts[:1], f"Usage: /edit <id> {TASK_FIELDS_USAGE}")
    if isinstance(resolved, str):
        return resolved
    task = resolved

    try:
        draft = apply_fields(TaskDraft.from_task(task), _split_fields(parts[1] if len(parts) > 1 else ""))
    except ValueError as e:
        return f"Cannot parse task: {e}. Usage: /edit <id> {TASK_FIELDS_USAGE}"

    try:
        state.controller.edit(task, draft)
    except ValidationError as e:
        return f"Cannot save task: {e}."
    except PersistenceError:
        return "Could not save the task (see log for details)."

    return f"Updated [{task.short_id}] {task.title} in {task.category} at {task.start_date:%Y-%m-%d %H:%M}."


def cmd_archive(state: AppState, args: list[str]) -> str:
    resolved = _resolve(state, args, "Usage: /archive <id>")
    if isinstance(resolved, str):
        return resolved
    if resolved.is_archived:
        return f"[{resolved.short_id}] is already archived."
    try:
        state.controller.archive(resolved)
    except PersistenceError:
        return "Could not archive the task (see log for details)."
    return f"Archived [{resolved.short_id}] {resolved.title}."


def cmd_restore(state: AppState, args: list[str]) -> str:
    resolved = _resolve(state, args, "Usage: /restore <id>")
    if isinstance(resolved, str):
        return resolved
    if not resolved.is_archived:
        return f"[{resolved.short_id}] is not archived."
    try:
        state.controller.restore(resolved)
    except PersistenceError:
        return "Could not restore the task (see log for details)."
    return f"Restored [{resolved.short_id}] {resolved.title}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    resolved = _resolve(state, args, "Usage: /delete <id>")
    if isinstance(resolved, str):
        return resolved
    try:
        state.controller.delete(resolved)
    except PersistenceError:
        return "Could not delete the task (see log for details)."
    return f"Deleted [{resolved.short_id}] {resolved.title}."


def cmd_purge(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Deleting all archived tasks...")
    try:
        n = state.controller.delete_all_archived()
    except PersistenceError:
        return "Could not delete archived tasks (see log for details)."
    return f"Deleted {n} archived task(s)."


def cmd_pending(state: AppState, args: list[str]) -> str:
    ids = state.coordinator.pending_ids()
    if not ids:
        return "No pending notifications."
    lines = ["Pending notifications:"]
    for task_id in ids:
        request = state.notification_center.get_pending(task_id)
        if request is None:
            continue
        lines.append(f"  [{task_id[:8]}] {request.body}  fires {request.fire_at:%Y-%m-%d %H:%M}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task and notification counts.")
registry.register("list", cmd_list, help_text="Show active tasks grouped by category.", aliases=["ls"])
registry.register("archived", cmd_archived, help_text="Show archived tasks grouped by category.")
registry.register("add", cmd_add, help_text=f"Add a task: /add {TASK_FIELDS_USAGE}.", raw_args=True)
registry.register("edit", cmd_edit, help_text=f"Edit a task: /edit <id> {TASK_FIELDS_USAGE}.", raw_args=True)
registry.register("archive", cmd_archive, help_text="Archive a task: /archive <id>.")
registry.register("restore", cmd_restore, help_text="Restore an archived task: /restore <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task permanently: /delete <id>.", aliases=["rm"])
registry.register("purge", cmd_purge, help_text="Delete all archived tasks.")
registry.register("pending", cmd_pending, help_text="List pending notifications.")
