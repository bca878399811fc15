# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from trilium_todo.core.state import AppState
from trilium_todo.tasks.task_store import TaskStore

from .fakes import FakeNoteGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the connectors.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="trilium-todo-test",
        data_dir=tmp_path,
        trilium_api_url="http://trilium.test/etapi/notes/abc/content",
        trilium_api_token="token",
        http_timeout_seconds=1.0,
        console_user_id="console",
        stats_interval_seconds=0.01,
        matrix_enabled=False,
        console_enabled=True,
    )


@pytest.fixture()
def notes() -> FakeNoteGateway:
    return FakeNoteGateway()


@pytest.fixture()
def state(settings: SimpleNamespace, notes: FakeNoteGateway) -> AppState:
    """AppState wired with a real TaskStore and a fake note gateway."""
    return AppState(settings=settings, task_store=TaskStore(), notes=notes)
