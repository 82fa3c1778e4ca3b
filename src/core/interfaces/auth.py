"""Contrato del constructor de cabeceras de autenticación.

Por qué Protocol:
- Las operaciones de documentos no deciden el formato de la cabecera; reciben
  cualquier callable con esta forma (por defecto `create_auth_headers`).
- Permite sustituirlo en tests o por otro esquema sin tocar los adapters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthHeadersFactory(Protocol):
    """`(token, content_type) -> cabeceras`.

    Reglas:
    - `token` nulo o vacío => sin cabecera `Authorization`.
    - `content_type` nulo => sin `Content-Type` (p.ej. multipart, lo pone httpx).
    """

    def __call__(self, token: str | None, content_type: str | None = None) -> dict[str, str]:
        ...
