# tests/test_task_store.py

from __future__ import annotations

import pytest

from trilium_todo.tasks.task_models import Task, TaskError
from trilium_todo.tasks.task_store import TaskStore


def test_lists_are_per_user_and_ordered() -> None:
    store = TaskStore()
    store.add_task("u1", "first")
    store.add_task("u1", "  second  ")
    store.add_task("u2", "other")

    assert [t.text for t in store.get_user_tasks("u1")] == ["first", "second"]
    assert [t.text for t in store.get_user_tasks("u2")] == ["other"]


def test_add_rejects_empty_text() -> None:
    store = TaskStore()
    with pytest.raises(ValueError):
        store.add_task("u1", "   ")


def test_complete_reports_already_completed() -> None:
    store = TaskStore()
    store.add_task("u1", "a")

    first = store.complete_task("u1", 0)
    second = store.complete_task("u1", 0)

    assert first.success and not first.was_already_completed
    assert second.success and second.was_already_completed
    assert store.get_user_tasks("u1")[0].completed is True


@pytest.mark.parametrize("index", [-1, 1, 99])
def test_out_of_range_index_is_a_typed_failure(index: int) -> None:
    store = TaskStore()
    store.add_task("u1", "a")

    for result in (store.complete_task("u1", index), store.delete_task("u1", index)):
        assert result.success is False
        assert result.error is TaskError.INVALID_INDEX
        assert result.task is None

    assert len(store.get_user_tasks("u1")) == 1


def test_delete_and_clear() -> None:
    store = TaskStore()
    for text in ("a", "b", "c"):
        store.add_task("u1", text)

    deleted = store.delete_task("u1", 1)
    assert deleted.task is not None and deleted.task.text == "b"
    assert [t.text for t in store.get_user_tasks("u1")] == ["a", "c"]

    assert store.clear_all_tasks("u1") == 2
    assert store.get_user_tasks("u1") == []


def test_seed_initialises_new_users_with_independent_copies() -> None:
    store = TaskStore()
    store.seed([Task("from note", completed=True)])

    store.complete_task("u1", 0)
    store.delete_task("u1", 0)

    assert store.get_user_tasks("u1") == []
    assert [(t.text, t.completed) for t in store.get_user_tasks("u2")] == [("from note", True)]


def test_has_user_and_statistics() -> None:
    store = TaskStore()
    assert not store.has_user("u1")

    store.add_task("u1", "a")
    store.add_task("u1", "b")
    store.complete_task("u1", 0)
    store.add_task("u2", "c")

    assert store.has_user("u1")
    stats = store.get_statistics()
    assert (stats.total_users, stats.total_tasks, stats.completed_tasks, stats.pending_tasks) == (2, 3, 1, 2)


def test_sync_from_remote_merges_into_user_list() -> None:
    store = TaskStore()
    store.add_task("u1", "Buy milk")

    changes = store.sync_from_remote("u1", [Task("Buy milk", completed=True), Task("Call Bob")])

    assert [(t.text, t.completed) for t in store.get_user_tasks("u1")] == [
        ("Buy milk", True),
        ("Call Bob", False),
    ]
    assert changes.summary() == {"added": ["Call Bob"], "updated": ["Buy milk"], "preserved": []}
