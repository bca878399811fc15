# src/trilium_todo/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .reconcile import merge_remote
from .task_models import ChangeSet, IndexResult, Task, TaskError, TaskStats

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory per-user task lists.

    Lists are ordered; the position (0-based here, 1-based for users) is how
    chat commands address a task. Nothing is persisted: the Trilium note is the
    only copy that survives a restart, and `seed()` brings it back in.

    Not locked: callers run on a single event loop and mutate lists between
    awaits.
    """

    def __init__(self) -> None:
        self._lists: dict[str, list[Task]] = {}
        self._seed: list[Task] = []

    # ---- setup ----

    def seed(self, tasks: Iterable[Task]) -> int:
        """
        Remember a startup snapshot (usually decoded from the note).

        Every user list created afterwards starts as a copy of it.
        """
        self._seed = [t.copy() for t in tasks]
        logger.info("TaskStore seeded with %d task(s)", len(self._seed))
        return len(self._seed)

    def _list_for(self, user_id: str) -> list[Task]:
        tasks = self._lists.get(user_id)
        if tasks is None:
            tasks = [t.copy() for t in self._seed]
            self._lists[user_id] = tasks
            logger.debug("New task list for user=%s (seeded=%d)", user_id, len(tasks))
        return tasks

    # ---- queries ----

    def has_user(self, user_id: str) -> bool:
        return user_id in self._lists

    def get_user_tasks(self, user_id: str) -> list[Task]:
        return self._list_for(user_id)

    def get_statistics(self) -> TaskStats:
        all_tasks = [t for tasks in self._lists.values() for t in tasks]
        completed = sum(1 for t in all_tasks if t.completed)
        return TaskStats(
            total_users=len(self._lists),
            total_tasks=len(all_tasks),
            completed_tasks=completed,
            pending_tasks=len(all_tasks) - completed,
        )

    # ---- mutations ----

    def add_task(self, user_id: str, text: str) -> Task:
        if not text or not text.strip():
            raise ValueError("task text is required")

        task = Task(text=text.strip())
        tasks = self._list_for(user_id)
        tasks.append(task)
        logger.debug("Task added user=%s index=%d text=%r", user_id, len(tasks), task.text)
        return task

    def complete_task(self, user_id: str, index: int) -> IndexResult:
        tasks = self._list_for(user_id)
        if not 0 <= index < len(tasks):
            return IndexResult(success=False, error=TaskError.INVALID_INDEX)

        task = tasks[index]
        if task.completed:
            return IndexResult(success=True, task=task, was_already_completed=True)

        task.completed = True
        logger.debug("Task completed user=%s index=%d", user_id, index + 1)
        return IndexResult(success=True, task=task)

    def delete_task(self, user_id: str, index: int) -> IndexResult:
        tasks = self._list_for(user_id)
        if not 0 <= index < len(tasks):
            return IndexResult(success=False, error=TaskError.INVALID_INDEX)

        task = tasks.pop(index)
        logger.debug("Task deleted user=%s index=%d text=%r", user_id, index + 1, task.text)
        return IndexResult(success=True, task=task)

    def clear_all_tasks(self, user_id: str) -> int:
        tasks = self._list_for(user_id)
        n = len(tasks)
        tasks.clear()
        logger.debug("Tasks cleared user=%s count=%d", user_id, n)
        return n

    def sync_from_remote(self, user_id: str, remote_tasks: Iterable[Task]) -> ChangeSet:
        """Merge a decoded note snapshot into the user's list (see reconcile.merge_remote)."""
        return merge_remote(self._list_for(user_id), remote_tasks)
