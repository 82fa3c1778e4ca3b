"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- `Document` es tolerante: la API es la dueña del esquema, aquí solo lo
  describimos para quien quiera acceso tipado.

Nota:
- Las operaciones HTTP devuelven el JSON crudo (`DocumentPayload`); convertirlo
  a `Document` es opcional y lo decide el llamador.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

DocumentPayload = dict[str, Any]

FileInput = Union[Path, tuple[str, Union[bytes, BinaryIO]], tuple[str, Union[bytes, BinaryIO], str]]


class StorageFile(BaseModel):
    """Referencia a un fichero almacenado (una versión del documento)."""

    model_config = ConfigDict(extra="allow")

    bucket: str = Field(..., description="Bucket de almacenamiento.")
    key: str = Field(..., description="Clave del objeto dentro del bucket.")
    version: int = Field(default=1, description="Versión del fichero.")
    filename: str | None = Field(default=None, description="Nombre original del fichero.")
    content_type: str | None = Field(default=None, description="MIME type del fichero.")
    timestamp: str | None = Field(default=None, description="Momento de almacenamiento (ISO 8601).")


class Document(BaseModel):
    """Documento tal como lo describe la API remota.

    Por qué tan permisivo:
    - El cliente confía en la forma que envía el servidor; solo `external_id`
      es obligatorio y los campos desconocidos se conservan.
    """

    model_config = ConfigDict(extra="allow")

    external_id: str = Field(..., min_length=1, description="Identificador único del documento.")
    owner: dict[str, Any] = Field(default_factory=dict)
    content_type: str | None = Field(default=None)
    filename: str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)
    storage_info: dict[str, Any] = Field(default_factory=dict)
    storage_files: list[StorageFile] = Field(default_factory=list)
    system_metadata: dict[str, Any] = Field(default_factory=dict)
    additional_metadata: dict[str, Any] = Field(default_factory=dict)
    access_control: dict[str, Any] = Field(default_factory=dict)
    chunk_ids: list[str] = Field(default_factory=list)

    @property
    def latest_file(self) -> StorageFile | None:
        if not self.storage_files:
            return None
        return max(self.storage_files, key=lambda f: f.version)


class UpdateOptions(BaseModel):
    """Parámetros opcionales de una actualización (texto o fichero).

    `use_colpali` es tri-estado: `None` omite el query param, `False` lo envía.
    """

    model_config = ConfigDict(extra="forbid")

    filename: str | None = Field(
        default=None,
        description="Nombre a registrar (solo aplica a update_text).",
    )
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Metadata a fusionar; se envía como string JSON.",
    )
    rules: list[dict[str, Any]] | None = Field(
        default=None,
        description="Reglas de extracción/procesado; se envían como string JSON.",
    )
    update_strategy: str | None = Field(
        default=None,
        description="Estrategia de actualización interpretada por el servidor (p.ej. 'add').",
    )
    use_colpali: bool | None = Field(
        default=None,
        description="Activa el modo de procesado ColPali en el servidor.",
    )
