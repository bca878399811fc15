# src/trilium_todo/tasks/reconcile.py

"""
One-directional merge of a remote snapshot into a local task list.

Policy:
- the note is authoritative for `completed` of tasks both sides know about;
- tasks only present in the note are appended locally;
- tasks only present locally are left alone and not reported
  (the note may simply not have caught up; only delete/clear remove tasks).

Text is the matching key. With duplicate text each local task is matched at
most once, in list order ("first unconsumed match").
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import ChangeSet, Task

logger = logging.getLogger(__name__)


def _first_unconsumed(local: list[Task], text: str, consumed: set[int]) -> int | None:
    for i, task in enumerate(local):
        if i not in consumed and task.text == text:
            return i
    return None


def merge_remote(local: list[Task], remote: Iterable[Task]) -> ChangeSet:
    """
    Merge `remote` into `local` in place and return what happened.

    Pure in-memory; cannot fail.
    """
    changes = ChangeSet()
    consumed: set[int] = set()

    for r in remote:
        idx = _first_unconsumed(local, r.text, consumed)

        if idx is None:
            task = r.copy()
            local.append(task)
            consumed.add(len(local) - 1)
            changes.added.append(task)
            continue

        consumed.add(idx)
        task = local[idx]
        if task.completed != r.completed:
            task.completed = r.completed
            changes.updated.append(task)
        else:
            changes.preserved.append(task)

    logger.debug(
        "Merged remote snapshot: added=%d updated=%d preserved=%d local_total=%d",
        len(changes.added),
        len(changes.updated),
        len(changes.preserved),
        len(local),
    )
    return changes
