"""Cliente de la API de documentos (actualizaciones).

Operaciones:
- `update_document_with_text`  -> POST {base}/documents/{id}/update_text
- `update_document_with_file`  -> POST {base}/documents/{id}/update_file (multipart)
- `update_document_metadata`   -> POST {base}/documents/{id}/update_metadata

Contrato con el servidor (no "arreglar"):
- `metadata` y `rules` viajan como *string* JSON dentro del body/form
  (doble codificación).
- `use_colpali=None` omite el query param; `False` envía `use_colpali=false`.

Cada llamada es un único request: sin reintentos ni estado compartido. Los
errores se registran con `logger.exception` y se relanzan sin transformar.
"""

from __future__ import annotations

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, BinaryIO

import httpx

from adapters.http_client import build_async_client, create_auth_headers
from core.config import AppSettings
from core.domain.models import DocumentPayload, FileInput, UpdateOptions
from core.errors import DocumentsAPIError
from core.interfaces.auth import AuthHeadersFactory

logger = logging.getLogger(__name__)

_JSON_CONTENT_TYPE = "application/json"


def _dumps(value: Any) -> str:
    # Compacto y sin escapar no-ASCII: mismo formato que espera el servidor.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _document_url(api_base_url: str, document_id: str, action: str, use_colpali: bool | None = None) -> str:
    url = f"{api_base_url}/documents/{document_id}/{action}"
    if use_colpali is not None:
        url += f"?use_colpali={'true' if use_colpali else 'false'}"
    return url


def _file_part(file: FileInput) -> tuple[str, bytes | BinaryIO, str]:
    """Normaliza la entrada al tuple `(filename, content, content_type)` de httpx."""

    if isinstance(file, Path):
        filename, content, content_type = file.name, file.read_bytes(), None
    elif len(file) == 2:
        filename, content = file  # type: ignore[misc]
        content_type = None
    else:
        filename, content, content_type = file  # type: ignore[misc]

    if not content_type:
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return filename, content, content_type


async def _post(
    url: str,
    *,
    client: httpx.AsyncClient | None,
    settings: AppSettings | None,
    **kwargs: Any,
) -> httpx.Response:
    if client is not None:
        return await client.post(url, **kwargs)
    async with build_async_client(settings) as owned:
        return await owned.post(url, **kwargs)


def _parse_response(response: httpx.Response, operation: str) -> DocumentPayload:
    if not response.is_success:
        raise DocumentsAPIError(
            operation,
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=response.text,
        )
    return response.json()


async def update_document_with_text(
    api_base_url: str,
    document_id: str,
    text: str,
    auth_token: str | None,
    options: UpdateOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: AppSettings | None = None,
    auth_headers: AuthHeadersFactory = create_auth_headers,
) -> DocumentPayload:
    """Actualiza un documento con contenido de texto.

    Devuelve el JSON del documento actualizado tal cual lo envía la API.
    """

    options = options or UpdateOptions()
    try:
        url = _document_url(api_base_url, document_id, "update_text", options.use_colpali)

        body: dict[str, Any] = {"text": text}
        if options.filename:
            body["filename"] = options.filename
        if options.metadata is not None:
            body["metadata"] = _dumps(options.metadata)
        if options.rules is not None:
            body["rules"] = _dumps(options.rules)
        if options.update_strategy:
            body["update_strategy"] = options.update_strategy

        response = await _post(
            url,
            client=client,
            settings=settings,
            headers=auth_headers(auth_token, _JSON_CONTENT_TYPE),
            content=_dumps(body).encode("utf-8"),
        )
        return _parse_response(response, "update document with text")
    except Exception:
        logger.exception("Error updating document with text (document_id=%s)", document_id)
        raise


async def update_document_with_file(
    api_base_url: str,
    document_id: str,
    file: FileInput,
    auth_token: str | None,
    options: UpdateOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: AppSettings | None = None,
    auth_headers: AuthHeadersFactory = create_auth_headers,
) -> DocumentPayload:
    """Actualiza un documento subiendo un fichero (multipart/form-data).

    `options.filename` no aplica: el nombre viaja con el propio fichero. El
    Content-Type (con boundary) lo fija httpx.
    """

    options = options or UpdateOptions()
    try:
        url = _document_url(api_base_url, document_id, "update_file", options.use_colpali)

        data: dict[str, str] = {}
        if options.metadata is not None:
            data["metadata"] = _dumps(options.metadata)
        if options.rules is not None:
            data["rules"] = _dumps(options.rules)
        if options.update_strategy:
            data["update_strategy"] = options.update_strategy

        response = await _post(
            url,
            client=client,
            settings=settings,
            headers=auth_headers(auth_token),
            data=data,
            files={"file": _file_part(file)},
        )
        return _parse_response(response, "update document with file")
    except Exception:
        logger.exception("Error updating document with file (document_id=%s)", document_id)
        raise


async def update_document_metadata(
    api_base_url: str,
    document_id: str,
    metadata: dict[str, Any],
    auth_token: str | None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: AppSettings | None = None,
    auth_headers: AuthHeadersFactory = create_auth_headers,
) -> DocumentPayload:
    """Fusiona `metadata` en el documento. Se envía completa, sin campos opcionales."""

    try:
        url = _document_url(api_base_url, document_id, "update_metadata")
        response = await _post(
            url,
            client=client,
            settings=settings,
            headers=auth_headers(auth_token, _JSON_CONTENT_TYPE),
            content=_dumps({"metadata": metadata}).encode("utf-8"),
        )
        return _parse_response(response, "update document metadata")
    except Exception:
        logger.exception("Error updating document metadata (document_id=%s)", document_id)
        raise
