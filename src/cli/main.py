"""CLI principal (Typer).

Comandos:
- update-text / update-file / update-metadata: envuelven las operaciones de
  `adapters.documents_api` y muestran el documento devuelto.
- doctor: diagnóstico de configuración y conectividad.
- deploy: validación/inspección del descriptor de despliegue.
"""

from __future__ import annotations

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Optional

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.documents_api import (
    update_document_metadata,
    update_document_with_file,
    update_document_with_text,
)
from adapters.json_exporter import export_document_json
from cli import deploy, doctor
from cli.ui_components import build_document_table, print_banner
from core.config import AppSettings
from core.domain.models import Document, DocumentPayload, UpdateOptions
from core.errors import DocumentsAPIError
from core.log import configure_logging

app = typer.Typer(no_args_is_help=True, help="Update documents in a Morphik-compatible document API.")
app.add_typer(doctor.app, name="doctor")
app.add_typer(deploy.app, name="deploy")

_console = Console()


class ColpaliMode(str, Enum):
    TRUE = "true"
    FALSE = "false"


def _parse_json_object(value: Optional[str]) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter("expected a JSON object")
    return data


def _parse_json_rules(value: Optional[str]) -> Optional[list[dict[str, Any]]]:
    if value is None:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(rule, dict) for rule in data):
        raise typer.BadParameter("expected a JSON array of objects")
    return data


ApiUrlOption = typer.Option(None, "--api-url", help="API base URL (defaults to MORPHIK_DOCS_API_BASE_URL).")
TokenOption = typer.Option(None, "--token", help="Bearer token (defaults to MORPHIK_DOCS_AUTH_TOKEN).")
OutputOption = typer.Option(None, "--output", "-o", help="Write the returned document as JSON.")
MetadataOption = typer.Option(None, "--metadata", help="Metadata as a JSON object.")
RulesOption = typer.Option(None, "--rules", help="Rules as a JSON array of objects.")
StrategyOption = typer.Option(None, "--update-strategy", help="Server-side update strategy (e.g. add).")
ColpaliOption = typer.Option(None, "--use-colpali", help="Send use_colpali=true|false (omitted if unset).")


def _options(
    *,
    metadata: Optional[str],
    rules: Optional[str],
    update_strategy: Optional[str],
    use_colpali: Optional[ColpaliMode],
    filename: Optional[str] = None,
) -> UpdateOptions:
    return UpdateOptions(
        filename=filename,
        metadata=_parse_json_object(metadata),
        rules=_parse_json_rules(rules),
        update_strategy=update_strategy,
        use_colpali=None if use_colpali is None else use_colpali is ColpaliMode.TRUE,
    )


def _execute(call: Awaitable[DocumentPayload], output: Optional[Path]) -> None:
    try:
        payload = asyncio.run(call)
    except (DocumentsAPIError, httpx.HTTPError, ValueError) as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    try:
        _console.print(build_document_table(Document.model_validate(payload)))
    except ValidationError:
        _console.print_json(data=payload)

    if output is not None:
        path = export_document_json(document=payload, output_path=output)
        _console.print(f"[green]Saved:[/green] {path}")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override MORPHIK_DOCS_LOG_LEVEL."),
) -> None:
    """Document update client."""

    settings = AppSettings()
    configure_logging((log_level or settings.log_level).upper())
    if _console.is_terminal:
        print_banner(_console)


@app.command("update-text")
def update_text(
    document_id: str = typer.Argument(..., help="Document external id."),
    text: str = typer.Argument(..., help="New text content."),
    filename: Optional[str] = typer.Option(None, "--filename", help="Filename to record."),
    metadata: Optional[str] = MetadataOption,
    rules: Optional[str] = RulesOption,
    update_strategy: Optional[str] = StrategyOption,
    use_colpali: Optional[ColpaliMode] = ColpaliOption,
    api_url: Optional[str] = ApiUrlOption,
    token: Optional[str] = TokenOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Replace or extend a document with text content."""

    settings = AppSettings()
    options = _options(
        filename=filename,
        metadata=metadata,
        rules=rules,
        update_strategy=update_strategy,
        use_colpali=use_colpali,
    )
    call = update_document_with_text(
        api_url or settings.api_base_url,
        document_id,
        text,
        token or settings.auth_token,
        options,
        settings=settings,
    )
    _execute(call, output)


@app.command("update-file")
def update_file(
    document_id: str = typer.Argument(..., help="Document external id."),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload."),
    metadata: Optional[str] = MetadataOption,
    rules: Optional[str] = RulesOption,
    update_strategy: Optional[str] = StrategyOption,
    use_colpali: Optional[ColpaliMode] = ColpaliOption,
    api_url: Optional[str] = ApiUrlOption,
    token: Optional[str] = TokenOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Replace or extend a document with a file upload."""

    settings = AppSettings()
    options = _options(
        metadata=metadata,
        rules=rules,
        update_strategy=update_strategy,
        use_colpali=use_colpali,
    )
    call = update_document_with_file(
        api_url or settings.api_base_url,
        document_id,
        file,
        token or settings.auth_token,
        options,
        settings=settings,
    )
    _execute(call, output)


@app.command("update-metadata")
def update_metadata(
    document_id: str = typer.Argument(..., help="Document external id."),
    metadata: str = typer.Argument(..., help="Metadata as a JSON object."),
    api_url: Optional[str] = ApiUrlOption,
    token: Optional[str] = TokenOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Merge metadata into a document."""

    settings = AppSettings()
    data = _parse_json_object(metadata) or {}
    call = update_document_metadata(
        api_url or settings.api_base_url,
        document_id,
        data,
        token or settings.auth_token,
        settings=settings,
    )
    _execute(call, output)


def run() -> None:
    app()
