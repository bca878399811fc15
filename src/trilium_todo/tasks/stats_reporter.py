# src/trilium_todo/tasks/stats_reporter.py

from __future__ import annotations

"""
Periodic statistics logger.

A small loop that every `interval_seconds` logs how many users and tasks the
store holds, plus process uptime. To stop it, cancel the coroutine/task.
"""

import asyncio
import logging
import time

from .task_store import TaskStore

logger = logging.getLogger(__name__)


def log_statistics(task_store: TaskStore, *, started_at: float) -> None:
    stats = task_store.get_statistics()
    logger.info(
        "Bot statistics users=%d tasks=%d completed=%d pending=%d uptime_s=%.0f",
        stats.total_users,
        stats.total_tasks,
        stats.completed_tasks,
        stats.pending_tasks,
        time.time() - started_at,
    )


async def run_stats_reporter(
        task_store: TaskStore,
        *,
        interval_seconds: float = 30 * 60.0,
        started_at: float | None = None,
) -> None:
    sleep_s = max(0.01, float(interval_seconds))
    t0 = time.time() if started_at is None else started_at

    while True:
        await asyncio.sleep(sleep_s)
        try:
            log_statistics(task_store, started_at=t0)
        except Exception:
            logger.exception("Statistics report failed")
