# src/trilium_todo/tasks/task_models.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum


class TaskError(StrEnum):
    """Expected, caller-visible failure reasons for task operations."""

    INVALID_INDEX = "invalid_index"


@dataclass(slots=True)
class Task:
    """
    One entry of a user's task list.

    `text` is the only identity the note markup carries; `created_at` is local
    bookkeeping and is re-stamped whenever a task is decoded from the note.
    """

    text: str
    completed: bool = False
    created_at: float = field(default_factory=time.time)

    def copy(self) -> Task:
        return Task(text=self.text, completed=self.completed)


@dataclass(slots=True)
class ChangeSet:
    """Outcome of merging a remote snapshot into a local list (reporting only)."""

    added: list[Task] = field(default_factory=list)
    updated: list[Task] = field(default_factory=list)
    preserved: list[Task] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.updated)

    def summary(self) -> dict[str, list[str]]:
        return {
            "added": [t.text for t in self.added],
            "updated": [t.text for t in self.updated],
            "preserved": [t.text for t in self.preserved],
        }


@dataclass(slots=True, frozen=True)
class IndexResult:
    """Result of addressing a task by position (complete / delete)."""

    success: bool
    task: Task | None = None
    was_already_completed: bool = False
    error: TaskError | None = None


@dataclass(slots=True, frozen=True)
class ReloadResult:
    """Result of fetching the note and merging it into a user's list."""

    success: bool
    tasks: list[Task] = field(default_factory=list)
    changes: ChangeSet = field(default_factory=ChangeSet)
    remote_count: int = 0
    error: str | None = None


@dataclass(slots=True, frozen=True)
class TaskStats:
    total_users: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
