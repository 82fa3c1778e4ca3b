"""Exportación JSON del documento devuelto por la API.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Se exporta el payload crudo, sin pasar por el modelo, para no perder campos.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import DocumentPayload


def export_document_json(*, document: DocumentPayload, output_path: Path) -> Path:
    """Exporta el documento a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(document, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
