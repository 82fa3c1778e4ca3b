from __future__ import annotations

import asyncio

import httpx

from adapters.http_client import build_async_client, create_auth_headers
from core.config import AppSettings
from core.interfaces.auth import AuthHeadersFactory


def test_auth_headers_without_token_or_content_type() -> None:
    assert create_auth_headers(None) == {}
    assert create_auth_headers("") == {}


def test_auth_headers_with_token_and_content_type() -> None:
    assert create_auth_headers("abc", "application/json") == {
        "Content-Type": "application/json",
        "Authorization": "Bearer abc",
    }


def test_auth_headers_satisfies_protocol() -> None:
    assert isinstance(create_auth_headers, AuthHeadersFactory)


def test_client_uses_httpx_default_timeout_when_unset() -> None:
    client = build_async_client(AppSettings(http_timeout_seconds=None))
    try:
        assert client.timeout == httpx.Timeout(5.0)
        assert client.headers["accept"] == "application/json"
        assert client.headers["user-agent"] == "morphik-docs/0.1"
        assert "content-type" not in client.headers
    finally:
        asyncio.run(client.aclose())


def test_client_applies_explicit_timeout_and_extra_headers() -> None:
    settings = AppSettings(http_timeout_seconds=12.5, user_agent="tests/1.0")
    client = build_async_client(settings, extra_headers={"X-Trace": "1"})
    try:
        assert client.timeout == httpx.Timeout(12.5)
        assert client.headers["user-agent"] == "tests/1.0"
        assert client.headers["x-trace"] == "1"
    finally:
        asyncio.run(client.aclose())


def test_client_routes_through_injected_transport() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"status": "ok"})

    async def _call() -> dict:
        async with build_async_client(AppSettings(), transport=httpx.MockTransport(handler)) as client:
            response = await client.get("http://api.test/health")
        return response.json()

    assert asyncio.run(_call()) == {"status": "ok"}
    assert seen == ["http://api.test/health"]
