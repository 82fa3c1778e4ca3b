"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y User-Agent para todas las llamadas a la API.
- Facilita testeo: se puede inyectar un `transport` (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import AppSettings


def create_auth_headers(token: str | None, content_type: str | None = None) -> dict[str, str]:
    """Cabeceras de autenticación (+ Content-Type opcional).

    Implementa `core.interfaces.auth.AuthHeadersFactory`.
    """

    headers: dict[str, str] = {}
    if content_type:
        headers["Content-Type"] = content_type
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults del proyecto.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las operaciones se comporten igual.
    - Sin `http_timeout_seconds` explícito se respeta el timeout por defecto de httpx.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    kwargs: dict[str, Any] = {
        "follow_redirects": True,
        "headers": headers,
    }
    if settings.http_timeout_seconds is not None:
        kwargs["timeout"] = httpx.Timeout(settings.http_timeout_seconds)
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)
