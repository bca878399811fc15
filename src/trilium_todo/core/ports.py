# src/trilium_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Task operations depend on Protocols instead of concrete implementations,
so the Trilium gateway and chat connectors can be swapped for fakes in tests.
"""

from dataclasses import dataclass
from typing import Protocol

from ..tasks.task_models import Task


@dataclass(slots=True, frozen=True)
class FetchResult:
    success: bool
    content: str = ""
    status: int | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class PushResult:
    success: bool
    status: int | None = None
    error: str | None = None


class NoteGateway(Protocol):
    """
    Remote note holding the task markup.

    Transport failures are reported through the result objects, never raised.
    """

    async def fetch(self) -> FetchResult: ...

    async def push(self, markup: str) -> PushResult: ...

    async def load_tasks(self) -> list[Task]: ...

    async def test_connection(self) -> FetchResult: ...

    async def aclose(self) -> None: ...

