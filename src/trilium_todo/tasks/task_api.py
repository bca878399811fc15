# src/trilium_todo/tasks/task_api.py

"""
Task operations that touch both the local store and the Trilium note.

Every remote call is an await point. Nothing here is locked, so two commands
from the same user can interleave across those points: e.g. an /add may push
its list before a concurrent /reload has merged, and the later push wins in
the note. The note always receives the full list, so the next successful push
repairs it.
"""

from __future__ import annotations

import logging

from ..core.ports import PushResult
from ..core.state import AppState
from . import html_codec
from .task_models import ChangeSet, IndexResult, ReloadResult, Task

logger = logging.getLogger(__name__)


async def push_user_tasks(state: AppState, user_id: str) -> PushResult:
    """Overwrite the note with the user's full list (completed and pending)."""
    tasks = state.task_store.get_user_tasks(user_id)
    markup = html_codec.encode(tasks)
    completed = sum(1 for t in tasks if t.completed)
    logger.info(
        "Pushing tasks user=%s total=%d completed=%d pending=%d chars=%d",
        user_id,
        len(tasks),
        completed,
        len(tasks) - completed,
        len(markup),
    )
    result = await state.notes.push(markup)
    if not result.success:
        logger.warning("Push failed user=%s error=%s", user_id, result.error)
    return result


async def reload_from_remote(state: AppState, user_id: str) -> ReloadResult:
    """Fetch the note, decode it and merge it into the user's list."""
    fetched = await state.notes.fetch()
    if not fetched.success:
        return ReloadResult(success=False, error=fetched.error or "fetch failed")

    remote = html_codec.decode(fetched.content)
    changes = state.task_store.sync_from_remote(user_id, remote)
    tasks = state.task_store.get_user_tasks(user_id)

    logger.info("Reloaded from note user=%s remote=%d changes=%s", user_id, len(remote), changes.summary())
    return ReloadResult(success=True, tasks=tasks, changes=changes, remote_count=len(remote))


async def add_task_with_sync(state: AppState, user_id: str, text: str) -> tuple[Task, ChangeSet, PushResult]:
    """
    Pull external edits first, then add and push.

    The pre-sync is best-effort: an unreachable note leaves the list as is
    and an empty ChangeSet is reported.
    """
    reloaded = await reload_from_remote(state, user_id)
    changes = reloaded.changes if reloaded.success else ChangeSet()

    task = state.task_store.add_task(user_id, text)
    pushed = await push_user_tasks(state, user_id)
    return task, changes, pushed


async def complete_task_and_push(state: AppState, user_id: str, index: int) -> tuple[IndexResult, PushResult | None]:
    """Complete by 0-based index; push only if the task actually changed."""
    result = state.task_store.complete_task(user_id, index)
    if not result.success or result.was_already_completed:
        return result, None
    return result, await push_user_tasks(state, user_id)


async def delete_task_and_push(state: AppState, user_id: str, index: int) -> tuple[IndexResult, PushResult | None]:
    result = state.task_store.delete_task(user_id, index)
    if not result.success:
        return result, None
    return result, await push_user_tasks(state, user_id)


async def clear_tasks_and_push(state: AppState, user_id: str) -> tuple[int, PushResult]:
    n = state.task_store.clear_all_tasks(user_id)
    return n, await push_user_tasks(state, user_id)


async def load_startup_tasks(state: AppState) -> int:
    """Seed the store from the note so restarts do not lose tasks."""
    tasks = await state.notes.load_tasks()
    return state.task_store.seed(tasks)
