# src/trilium_todo/notes/trilium_client.py

from __future__ import annotations

import logging

import httpx

from ..core.ports import FetchResult, PushResult
from ..tasks import html_codec
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

# InvalidURL (malformed host or port) is not an HTTPError.
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def _make_timeout(total_s: float) -> httpx.Timeout:
    connect_s = min(5.0, total_s)
    return httpx.Timeout(total_s, connect=connect_s)


def _error_status(exc: Exception) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


class TriliumGateway:
    """
    Reads and overwrites the content of one Trilium note over ETAPI.

    `api_url` points at the note content endpoint
    (e.g. https://trilium.example/etapi/notes/<noteId>/content); `api_token`
    is sent verbatim in the Authorization header.

    Every call returns a result object; transport errors and non-2xx responses
    are logged here and never raised to callers.
    """

    def __init__(
        self,
        api_url: str,
        api_token: str,
        *,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self._client = httpx.AsyncClient(
            headers={"Authorization": api_token},
            timeout=_make_timeout(timeout_seconds),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> TriliumGateway:
        return cls(
            settings.trilium_api_url,
            settings.trilium_api_token,
            timeout_seconds=float(getattr(settings, "http_timeout_seconds", 15.0)),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self) -> FetchResult:
        try:
            resp = await self._client.get(self.api_url, headers={"accept": "text/html"})
            resp.raise_for_status()
        except _REQUEST_ERRORS as e:
            logger.error(
                "Failed to fetch note content url=%s status=%s error=%s",
                self.api_url,
                _error_status(e),
                e,
            )
            return FetchResult(success=False, status=_error_status(e), error=str(e) or e.__class__.__name__)

        content = resp.text or ""
        logger.info("Note content fetched status=%s chars=%d", resp.status_code, len(content))
        return FetchResult(success=True, content=content, status=resp.status_code)

    async def push(self, markup: str) -> PushResult:
        try:
            resp = await self._client.put(
                self.api_url,
                content=markup.encode("utf-8"),
                headers={"accept": "*/*", "Content-Type": "text/plain"},
            )
            resp.raise_for_status()
        except _REQUEST_ERRORS as e:
            logger.error(
                "Failed to push note content url=%s status=%s error=%s",
                self.api_url,
                _error_status(e),
                e,
            )
            return PushResult(success=False, status=_error_status(e), error=str(e) or e.__class__.__name__)

        logger.info("Note content pushed status=%s chars=%d", resp.status_code, len(markup))
        return PushResult(success=True, status=resp.status_code)

    async def load_tasks(self) -> list[Task]:
        """Fetch + decode. An unreachable note reads as no tasks."""
        result = await self.fetch()
        if not result.success:
            logger.warning("Could not load tasks from note: %s", result.error)
            return []

        tasks = html_codec.decode(result.content)
        logger.info(
            "Loaded %d task(s) from note (completed=%d)",
            len(tasks),
            sum(1 for t in tasks if t.completed),
        )
        return tasks

    async def test_connection(self) -> FetchResult:
        result = await self.fetch()
        if result.success:
            logger.info("Trilium connection OK (status=%s)", result.status)
        else:
            logger.warning("Trilium connection failed (status=%s): %s", result.status, result.error)
        return result
