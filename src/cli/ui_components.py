"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.deployment import ServiceSpec
from core.domain.models import Document


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("MORPHIK DOCS", style="bold cyan")
    subtitle = Text("Document updates • Metadata • Deploy checks", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_document_table(document: Document) -> Table:
    """Tabla con los campos principales de un documento actualizado."""

    table = Table(title=f"Document {document.external_id}", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("external_id", document.external_id)
    table.add_row("filename", document.filename or "-")
    table.add_row("content_type", document.content_type or "-")
    table.add_row("metadata", json.dumps(document.metadata, ensure_ascii=False) if document.metadata else "{}")
    table.add_row("chunks", str(len(document.chunk_ids)))

    latest = document.latest_file
    if latest is not None:
        table.add_row("latest file", f"{latest.bucket}/{latest.key} (v{latest.version})")
    return table


def build_service_table(service: ServiceSpec) -> Table:
    """Resumen del servicio descrito en el descriptor de despliegue."""

    table = Table(title=f"Service {service.name} ({service.type})")
    table.add_column("Section", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")

    if service.command:
        table.add_row("command", service.command)
    for port in service.ports:
        table.add_row("port", f"{port.port}/{port.protocol}")
    for var in service.env:
        table.add_row("env", f"{var.name}={var.value}")
    for route in service.routes:
        table.add_row("route", f"{route.path} -> {route.port}")
    for check in service.healthchecks:
        target = f"{check.type} :{check.port}{check.path or ''}"
        timing = (
            f"delay {check.initial_delay}, every {check.interval}, timeout {check.timeout}, "
            f"ok {check.success_threshold} / fail {check.failure_threshold}"
        )
        table.add_row("healthcheck", f"{target} ({timing})")
    return table
