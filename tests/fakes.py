# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from trilium_todo.core.ports import FetchResult, PushResult
from trilium_todo.tasks import html_codec
from trilium_todo.tasks.task_models import Task


@dataclass
class FakeNoteGateway:
    """
    In-memory NoteGateway.

    - `content` is what fetch() returns; push() overwrites it
    - `pushed` records every markup sent
    - `fail_fetch` / `fail_push` simulate transport failures
    """

    content: str = ""
    fail_fetch: bool = False
    fail_push: bool = False
    pushed: list[str] = field(default_factory=list)
    fetch_calls: int = 0
    closed: bool = False

    async def fetch(self) -> FetchResult:
        self.fetch_calls += 1
        if self.fail_fetch:
            return FetchResult(success=False, error="connection refused")
        return FetchResult(success=True, content=self.content, status=200)

    async def push(self, markup: str) -> PushResult:
        if self.fail_push:
            return PushResult(success=False, error="connection refused")
        self.pushed.append(markup)
        self.content = markup
        return PushResult(success=True, status=204)

    async def load_tasks(self) -> list[Task]:
        result = await self.fetch()
        if not result.success:
            return []
        return html_codec.decode(result.content)

    async def test_connection(self) -> FetchResult:
        return await self.fetch()

    async def aclose(self) -> None:
        self.closed = True


class EmitRecorder:
    """Collects the interim messages a command emits."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def __call__(self, text: str) -> None:
        self.messages.append(text)
