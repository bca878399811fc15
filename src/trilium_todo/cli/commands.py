# src/trilium_todo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..logging_setup import log_user_interaction
from ..tasks import task_api
from . import messages

CommandEmitter = Callable[[str], Awaitable[None]]
CommandHandler4 = Callable[[AppState, list[str], str | None, str | None], Awaitable[str]]
CommandHandler5 = Callable[
    [AppState, list[str], str | None, str | None, CommandEmitter | None], Awaitable[str]
]
CommandHandler = CommandHandler4 | CommandHandler5

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"


class CommandRegistry:
    """Slash-command registry used by connectors (/todo, /add, ...)."""

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
        raw_args: bool = False,
    ) -> None:
        """`raw_args` handlers get the rest of the line as typed, as a single argument."""
        aliases = aliases or []
        keys = [name.lower()] + [alias.lower() for alias in aliases]
        self._help[keys[0]] = help_text
        for key in keys:
            self._handlers[key] = handler
            if raw_args:
                self._raw.add(key)

    async def handle(
        self,
        state: AppState,
        line: str,
        user_id: str | None = None,
        room_id: str | None = None,
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

        # Matrix/Telegram style "/cmd@botname" addressing.
        name = parts[0].split("@", 1)[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._raw:
            args = [rest] if rest else []
        else:
            args = rest.split()

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 5

        if nparams >= 5:
            h5 = cast(CommandHandler5, handler)
            return await h5(state, args, user_id, room_id, emit)

        h4 = cast(CommandHandler4, handler)
        return await h4(state, args, user_id, room_id)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


async def _emit(emit: CommandEmitter | None, text: str) -> None:
    if emit is None:
        return
    with contextlib.suppress(Exception):
        await emit(text)


def _parse_position(args: list[str]) -> int | None:
    """1-based position from the first argument, as a 0-based index."""
    if not args:
        return None
    try:
        return int(args[0]) - 1
    except ValueError:
        return None


async def cmd_start(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    uid = user_id or ANONYMOUS_USER
    log_user_interaction(logger, "START_COMMAND", user_id=uid, room_id=room_id,
                         is_new_user=not state.task_store.has_user(uid))
    return messages.welcome_message()


async def cmd_help(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    log_user_interaction(logger, "HELP_COMMAND", user_id=user_id, room_id=room_id)
    return messages.help_message(registry.build_help())


async def cmd_todo(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    uid = user_id or ANONYMOUS_USER
    tasks = state.task_store.get_user_tasks(uid)
    completed = sum(1 for t in tasks if t.completed)
    log_user_interaction(logger, "VIEW_TASKS", user_id=uid, room_id=room_id,
                         task_count=len(tasks), completed=completed)
    return messages.format_task_list(tasks)


async def cmd_add(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /add <text>  -> pull external edits from the note, add, push the full list
    """
    uid = user_id or ANONYMOUS_USER
    text = args[0].strip() if args else ""
    if not text:
        return "Usage: /add <task>"

    log_user_interaction(logger, "ADD_TASK", user_id=uid, room_id=room_id, text=text)

    task, changes, pushed = await task_api.add_task_with_sync(state, uid, text)

    notice = messages.format_pre_add_sync(changes)
    if notice:
        await _emit(emit, notice)
        logger.info("Pre-add sync applied user=%s changes=%s", uid, changes.summary())

    return f'✅ Task added: "{task.text}"\n' + messages.push_outcome(pushed.success, "Task added")


async def cmd_complete(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    """
    /complete <n>  -> mark task n (1-based) as completed, push if it changed
    """
    uid = user_id or ANONYMOUS_USER
    index = _parse_position(args)
    if index is None:
        return "Usage: /complete <number>"

    result, pushed = await task_api.complete_task_and_push(state, uid, index)
    if not result.success or result.task is None:
        logger.warning(
            "Invalid task index for completion user=%s requested=%s total=%d",
            uid,
            index + 1,
            len(state.task_store.get_user_tasks(uid)),
        )
        return messages.get_error_message("invalid_index")

    log_user_interaction(logger, "COMPLETE_TASK", user_id=uid, room_id=room_id,
                         index=index + 1, already=result.was_already_completed)

    if result.was_already_completed:
        return f'ℹ️ Task "{result.task.text}" was already completed.'

    reply = f'✅ Task "{result.task.text}" marked as completed!'
    if pushed is not None:
        reply += "\n" + messages.push_outcome(pushed.success, "Task completed")
    return reply


async def cmd_delete(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    uid = user_id or ANONYMOUS_USER
    index = _parse_position(args)
    if index is None:
        return "Usage: /delete <number>"

    result, pushed = await task_api.delete_task_and_push(state, uid, index)
    if not result.success or result.task is None:
        logger.warning(
            "Invalid task index for deletion user=%s requested=%s total=%d",
            uid,
            index + 1,
            len(state.task_store.get_user_tasks(uid)),
        )
        return messages.get_error_message("invalid_index")

    log_user_interaction(logger, "DELETE_TASK", user_id=uid, room_id=room_id, text=result.task.text)

    reply = f'🗑️ Task deleted: "{result.task.text}"'
    if pushed is not None:
        reply += "\n" + messages.push_outcome(pushed.success, "Task deleted")
    return reply


async def cmd_clear(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    uid = user_id or ANONYMOUS_USER
    n, pushed = await task_api.clear_tasks_and_push(state, uid)
    log_user_interaction(logger, "CLEAR_TASKS", user_id=uid, room_id=room_id, cleared=n)
    return (
        f"🗑️ All tasks deleted. ({n} task(s) removed)\n"
        + messages.push_outcome(pushed.success, "Tasks deleted")
    )


async def cmd_sync(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /sync  -> overwrite the note with the full local list (manual retry)
    """
    uid = user_id or ANONYMOUS_USER
    tasks = state.task_store.get_user_tasks(uid)
    log_user_interaction(logger, "SYNC_TASKS", user_id=uid, room_id=room_id, task_count=len(tasks))

    await _emit(emit, "🔄 Syncing tasks with Trilium...")
    pushed = await task_api.push_user_tasks(state, uid)
    if not pushed.success:
        return messages.get_error_message("sync_failed")
    return messages.format_sync_summary(tasks)


async def cmd_reload(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /reload  -> merge the note into the local list and report the change set
    """
    uid = user_id or ANONYMOUS_USER
    log_user_interaction(logger, "RELOAD_FROM_TRILIUM", user_id=uid, room_id=room_id)

    await _emit(emit, "🔄 Reloading tasks from Trilium...")
    result = await task_api.reload_from_remote(state, uid)
    if not result.success:
        return messages.get_error_message("reload_failed")

    if result.remote_count == 0:
        return "📝 No tasks found in Trilium."

    await _emit(emit, messages.format_reload_summary(result.tasks, result.changes))
    return messages.format_task_list(result.tasks)


async def cmd_stats(
    state: AppState,
    args: list[str],
    user_id: str | None,
    room_id: str | None,
) -> str:
    return messages.format_stats(state.task_store.get_statistics())


registry.register("start", cmd_start, help_text="Welcome message.")
registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("todo", cmd_todo, help_text="Show all your tasks.", aliases=["list"])
registry.register("add", cmd_add, help_text="Add a task: /add <task>.", raw_args=True)
registry.register("complete", cmd_complete, help_text="Complete a task: /complete <number>.", aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <number>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete all your tasks.")
registry.register("sync", cmd_sync, help_text="Push your tasks to Trilium.")
registry.register("reload", cmd_reload, help_text="Pull tasks from Trilium and merge them.")
registry.register("stats", cmd_stats, help_text="Show task statistics.")
