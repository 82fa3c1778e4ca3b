"""Fixtures compartidas: API simulada con `httpx.MockTransport`."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

DOCUMENT: dict[str, Any] = {
    "external_id": "doc-1",
    "owner": {"type": "developer", "id": "dev-1"},
    "content_type": "text/plain",
    "filename": "notes.txt",
    "metadata": {"team": "search"},
    "storage_info": {},
    "storage_files": [
        {
            "bucket": "docs",
            "key": "doc-1/v1",
            "version": 1,
            "filename": "notes.txt",
            "content_type": "text/plain",
            "timestamp": "2024-05-01T10:00:00Z",
        },
        {
            "bucket": "docs",
            "key": "doc-1/v2",
            "version": 2,
            "filename": "notes.txt",
            "content_type": "text/plain",
            "timestamp": "2024-05-02T10:00:00Z",
        },
    ],
    "system_metadata": {"status": "completed"},
    "additional_metadata": {},
    "access_control": {"readers": [], "writers": []},
    "chunk_ids": ["c1", "c2"],
}


class MockAPI:
    """Registra cada request y responde con lo configurado en `respond`/`fail`."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._status_code = 200
        self._kwargs: dict[str, Any] = {"json": DOCUMENT}
        self._error: Exception | None = None

    def respond(self, status_code: int = 200, **kwargs: Any) -> None:
        self._status_code = status_code
        self._kwargs = kwargs

    def fail(self, error: Exception) -> None:
        self._error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return httpx.Response(self._status_code, **self._kwargs)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def run(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Ejecuta una operación async con un cliente apuntando a este mock."""

        async def _call() -> Any:
            async with httpx.AsyncClient(transport=self.transport()) as client:
                return await operation(*args, client=client, **kwargs)

        return asyncio.run(_call())


@pytest.fixture
def mock_api() -> MockAPI:
    return MockAPI()


@pytest.fixture
def patched_client(monkeypatch: pytest.MonkeyPatch, mock_api: MockAPI) -> MockAPI:
    """Hace que `build_async_client` (usado cuando no se inyecta cliente) hable con el mock."""

    def _build(settings: Any = None, **_: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=mock_api.transport())

    monkeypatch.setattr("adapters.documents_api.build_async_client", _build)
    return mock_api


@pytest.fixture
def document() -> dict[str, Any]:
    return DOCUMENT
