# src/trilium_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- validates settings once,
- ensures the local (gitignored) data directory exists,
- wires the Trilium gateway and the task store into AppState,
- checks the note and seeds the store from it.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notes.trilium_client import TriliumGateway
from ..tasks import task_api
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings(). Raises ConfigError when
    the Trilium URL/token are missing.
    """
    if settings is None:
        settings = get_settings()

    settings.validate()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    state = AppState(
        settings=settings,
        task_store=TaskStore(),
        notes=TriliumGateway.from_settings(settings),
    )
    logger.info("Services initialized (note=%s)", settings.trilium_api_url)
    return state


async def warm_up(state: AppState) -> None:
    """Startup checks: connection test, then load existing tasks from the note."""
    conn = await state.notes.test_connection()
    if not conn.success:
        logger.warning("Trilium is unreachable; the bot will run but syncing is unavailable.")
        return

    n = await task_api.load_startup_tasks(state)
    if n:
        logger.info("Loaded %d existing task(s) from Trilium", n)
    else:
        logger.info("No existing tasks found in Trilium")
