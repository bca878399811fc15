# src/trilium_todo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli import messages
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> You: "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin in a daemon thread and hand lines to the event loop.

    input() blocks; a daemon thread lets the process exit while it waits.
    None is queued on EOF / Ctrl+C.
    """

    def reader() -> None:
        while True:
            try:
                line = input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                loop.call_soon_threadsafe(lines.put_nowait, None)
                return
            loop.call_soon_threadsafe(lines.put_nowait, line)

    t = threading.Thread(target=reader, name="console-stdin", daemon=True)
    t.start()
    return t


async def run_console_loop(state: AppState) -> None:
    """REPL acting as one chat user (settings.console_user_id)."""
    user_id = str(getattr(state.settings, "console_user_id", "console"))
    logger.info("Console connector started (user=%s).", user_id)
    _print_ts("[CONSOLE] Type a command. Use /help for commands. Use /exit to quit.\n")

    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), lines)

    async def emit(text: str) -> None:
        _print_ts(text)

    while True:
        raw = await lines.get()
        if raw is None:
            logger.info("Console input closed, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, user_id=user_id, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = messages.get_error_message("unexpected_error")

        if reply is None:
            reply = messages.get_error_message("unrecognized_command")

        _print_ts(reply)

    logger.info("Console connector finished.")
