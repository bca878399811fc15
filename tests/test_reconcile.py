# tests/test_reconcile.py

from __future__ import annotations

from trilium_todo.tasks.reconcile import merge_remote
from trilium_todo.tasks.task_models import Task


def _pairs(tasks: list[Task]) -> list[tuple[str, bool]]:
    return [(t.text, t.completed) for t in tasks]


def test_worked_example_update_and_add() -> None:
    local = [Task("Buy milk")]
    remote = [Task("Buy milk", completed=True), Task("Call Bob")]

    changes = merge_remote(local, remote)

    assert _pairs(local) == [("Buy milk", True), ("Call Bob", False)]
    assert [t.text for t in changes.updated] == ["Buy milk"]
    assert [t.text for t in changes.added] == ["Call Bob"]
    assert changes.preserved == []


def test_remote_only_task_is_added_once() -> None:
    local = [Task("a"), Task("b")]
    changes = merge_remote(local, [Task("a"), Task("new")])

    assert len(changes.added) == 1
    assert len(local) == 3
    assert local[-1].text == "new"


def test_added_task_is_a_copy_not_the_remote_object() -> None:
    remote = [Task("x", completed=True)]
    local: list[Task] = []
    merge_remote(local, remote)

    assert local[0] is not remote[0]
    local[0].completed = False
    assert remote[0].completed is True


def test_merging_same_snapshot_twice_is_idempotent() -> None:
    local = [Task("a"), Task("b", completed=True)]
    remote = [Task("a", completed=True), Task("c"), Task("c")]

    merge_remote(local, remote)
    snapshot = _pairs(local)
    second = merge_remote(local, remote)

    assert second.added == []
    assert second.updated == []
    assert len(second.preserved) == len(remote)
    assert _pairs(local) == snapshot


def test_local_only_tasks_survive_and_are_not_reported() -> None:
    local = [Task("keep me"), Task("shared")]
    changes = merge_remote(local, [Task("shared")])

    assert [t.text for t in local] == ["keep me", "shared"]
    assert [t.text for t in changes.preserved] == ["shared"]
    assert changes.added == [] and changes.updated == []


def test_empty_remote_changes_nothing() -> None:
    local = [Task("a", completed=True)]
    changes = merge_remote(local, [])

    assert _pairs(local) == [("a", True)]
    assert not changes.has_changes
    assert changes.preserved == []


def test_remote_can_reopen_a_completed_task() -> None:
    local = [Task("a", completed=True)]
    changes = merge_remote(local, [Task("a", completed=False)])

    assert local[0].completed is False
    assert changes.updated == [local[0]]


def test_duplicate_text_uses_first_unconsumed_match() -> None:
    local = [Task("dup"), Task("dup")]
    changes = merge_remote(local, [Task("dup", completed=True), Task("dup", completed=False)])

    assert _pairs(local) == [("dup", True), ("dup", False)]
    assert changes.updated == [local[0]]
    assert changes.preserved == [local[1]]


def test_extra_remote_duplicates_are_appended() -> None:
    local = [Task("dup")]
    changes = merge_remote(local, [Task("dup"), Task("dup", completed=True)])

    assert _pairs(local) == [("dup", False), ("dup", True)]
    assert len(changes.added) == 1
    assert len(changes.preserved) == 1
