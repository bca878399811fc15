# src/trilium_todo/core/state.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskStore
from .ports import NoteGateway


@dataclass
class AppState:
    """Everything a command handler needs, passed explicitly (no module globals)."""

    settings: Any
    task_store: TaskStore
    notes: NoteGateway

    started_at: float = field(default_factory=time.time)
