# src/trilium_todo/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - allow trilium_todo logs
    - but keep the Matrix connector quiet unless WARNING+
    - suppress third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("trilium_todo."):
            if name.startswith("trilium_todo.connectors.matrix_"):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/trilium-todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - todo.log: full logs for debugging
    - error.log: ERROR+ only

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_dir / "todo.log"), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    eh = logging.FileHandler(str(log_dir / "error.log"), encoding="utf-8")
    eh.setLevel(logging.ERROR)
    eh.setFormatter(fmt)
    root.addHandler(eh)

    logging.captureWarnings(True)

    logging.getLogger("nio").setLevel(max(console_level, logging.INFO))
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def log_user_interaction(
    logger: logging.Logger,
    action: str,
    *,
    user_id: str | None,
    room_id: str | None = None,
    **details: Any,
) -> None:
    """One INFO line per chat action, with who/where and a few counters."""
    extra = " ".join(f"{k}={v!r}" for k, v in sorted(details.items()))
    logger.info(
        "User interaction: %s user=%s room=%s%s",
        action,
        user_id,
        room_id,
        f" {extra}" if extra else "",
    )
