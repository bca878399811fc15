# src/trilium_todo/cli/messages.py

"""User-facing message templates (plain text, shared by all connectors)."""

from __future__ import annotations

from ..tasks.task_models import ChangeSet, Task, TaskStats

COMMANDS_BLOCK = (
    "  /todo - show all your tasks\n"
    "  /add <task> - add a new task\n"
    "  /complete <number> - mark a task as completed\n"
    "  /delete <number> - delete a task\n"
    "  /clear - delete all tasks\n"
    "  /sync - push your tasks to Trilium\n"
    "  /reload - pull tasks from Trilium\n"
    "  /stats - task statistics\n"
    "  /help - show this help"
)

ERROR_MESSAGES = {
    "invalid_index": "❌ Invalid task number. Use /todo to see your tasks.",
    "sync_failed": (
        "❌ Could not sync with Trilium.\n\n"
        "Try again in a moment. If the problem persists, contact the administrator."
    ),
    "reload_failed": "❌ Could not load tasks from Trilium.\n\nCheck the Trilium connection.",
    "unexpected_error": "❌ Unexpected error while handling the request.\n\nPlease try again.",
    "unrecognized_command": "Use /help to see the available commands or /todo to see your tasks.",
}


def get_error_message(kind: str) -> str:
    return ERROR_MESSAGES.get(kind, ERROR_MESSAGES["unexpected_error"])


def welcome_message() -> str:
    return (
        "Hi! 👋 I keep your to-do list and mirror it into Trilium.\n\n"
        "Commands:\n"
        f"{COMMANDS_BLOCK}\n\n"
        "Let's get your tasks organised!"
    )


def help_message(commands_text: str) -> str:
    return (
        "📋 Task bot help\n\n"
        f"{commands_text}\n\n"
        "Examples:\n"
        "  /add Buy milk\n"
        "  /complete 1\n"
        "  /delete 2"
    )


def format_task_list(tasks: list[Task]) -> str:
    if not tasks:
        return "📝 You have no tasks. Perfect!"

    lines = ["📋 Your tasks:", ""]
    for i, task in enumerate(tasks, start=1):
        status = "✅" if task.completed else "⏳"
        lines.append(f"{status} {i}. {task.text}")
    return "\n".join(lines)


def format_counts(tasks: list[Task]) -> str:
    completed = sum(1 for t in tasks if t.completed)
    return (
        f"• Total tasks: {len(tasks)}\n"
        f"• Completed: {completed}\n"
        f"• Pending: {len(tasks) - completed}"
    )


def format_sync_summary(tasks: list[Task]) -> str:
    return "✅ Tasks synced to Trilium!\n\n📊 Summary:\n" + format_counts(tasks)


def format_pre_add_sync(changes: ChangeSet) -> str | None:
    """Short notice shown before /add when the note had external edits."""
    if not changes.has_changes:
        return None
    lines = ["🔄 Synced with Trilium before adding:"]
    if changes.updated:
        lines.append(f"✅ {len(changes.updated)} task(s) updated")
    if changes.added:
        lines.append(f"🆕 {len(changes.added)} new task(s) found")
    return "\n".join(lines)


def format_reload_summary(tasks: list[Task], changes: ChangeSet) -> str:
    lines = ["✅ Tasks reloaded from Trilium", "", "📊 Summary:", format_counts(tasks)]
    if changes.added:
        lines.append(f"🆕 New tasks: {len(changes.added)}")
    if changes.updated:
        lines.append(f"🔄 Updated tasks: {len(changes.updated)}")
    if changes.preserved:
        lines.append(f"✨ Unchanged tasks: {len(changes.preserved)}")
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    return (
        "📊 Task statistics:\n\n"
        f"👥 Active users: {stats.total_users}\n"
        f"📝 Total tasks: {stats.total_tasks}\n"
        f"✅ Completed: {stats.completed_tasks}\n"
        f"⏳ Pending: {stats.pending_tasks}"
    )


def push_outcome(ok: bool, what: str) -> str:
    if ok:
        return "🔄 Synced with Trilium automatically"
    return f"⚠️ {what} but the automatic sync failed. Use /sync to try again."
