"""Deployment descriptor commands (validate / show / env)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.deployment_loader import load_deployment
from cli.ui_components import build_service_table
from core.config import AppSettings
from core.domain.deployment import DeploymentDescriptor
from core.errors import DeploymentConfigError

app = typer.Typer(no_args_is_help=True, help="Inspect and validate the deployment descriptor.")

_console = Console()

PathArgument = typer.Argument(None, help="Descriptor path (defaults to MORPHIK_DOCS_DEPLOYMENT_PATH).")


def _load(path: Optional[Path]) -> DeploymentDescriptor:
    target = path or AppSettings().deployment_path
    try:
        return load_deployment(target)
    except DeploymentConfigError as exc:
        _console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


@app.command()
def validate(path: Optional[Path] = PathArgument) -> None:
    """Validate the descriptor schema."""

    descriptor = _load(path)
    service = descriptor.service
    _console.print(
        f"[green]OK[/green] {service.name}: {len(service.ports)} port(s), "
        f"{len(service.routes)} route(s), {len(service.healthchecks)} health check(s)"
    )


@app.command()
def show(path: Optional[Path] = PathArgument) -> None:
    """Print the descriptor as a table."""

    descriptor = _load(path)
    _console.print(build_service_table(descriptor.service))


@app.command()
def env(path: Optional[Path] = PathArgument) -> None:
    """Check that every ${VAR} placeholder is set in the current environment."""

    service = _load(path).service
    missing = service.missing_placeholders(os.environ)
    for name in service.placeholders():
        status = "[red]missing[/red]" if name in missing else "[green]set[/green]"
        _console.print(f"{name}: {status}")

    if missing:
        raise typer.Exit(code=1)
