# src/trilium_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs everything on one event loop:
- console REPL (optional),
- Matrix connector (optional),
- periodic statistics logger.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys

from ..cli.bootstrap import create_initial_state, warm_up
from ..config import ConfigError, get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.stats_reporter import log_statistics, run_stats_reporter

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    settings = state.settings
    stop_main = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_main.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no add_signal_handler.
            pass

    await warm_up(state)

    background: list[asyncio.Task] = [
        asyncio.create_task(
            run_stats_reporter(
                state.task_store,
                interval_seconds=settings.stats_interval_seconds,
                started_at=state.started_at,
            )
        )
    ]

    if settings.matrix_enabled:
        from ..connectors.matrix_connector import run_matrix_bot

        background.append(asyncio.create_task(run_matrix_bot(state, stop_main)))

    try:
        if settings.console_enabled:
            console = asyncio.create_task(run_console_loop(state))
            stopper = asyncio.create_task(stop_main.wait())
            await asyncio.wait({console, stopper}, return_when=asyncio.FIRST_COMPLETED)
            stop_main.set()
            for t in (console, stopper):
                t.cancel()
        else:
            logger.info("Console disabled. Running background connectors only. Press Ctrl+C to stop.")
            await stop_main.wait()
    finally:
        logger.info("Stopping...")
        for t in background:
            t.cancel()
        for t in background:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await t

        log_statistics(state.task_store, started_at=state.started_at)
        await state.notes.aclose()


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, settings.log_level, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except ConfigError as e:
        logger.error("Configuration validation failed: %s", e)
        sys.exit(1)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")


if __name__ == "__main__":
    main()
