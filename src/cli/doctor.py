"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.deployment_loader import load_deployment
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.errors import DeploymentConfigError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_health(settings: AppSettings) -> tuple[bool, str]:
    url = f"{settings.api_base_url}/health"
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
    except Exception as exc:
        return False, f"{url}: {exc}"
    return response.is_success, f"{url}: HTTP {response.status_code}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="morphik-docs Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base URL", "OK", settings.api_base_url)
    if settings.auth_token:
        table.add_row("Auth token", "OK", "Bearer token configured")
    else:
        table.add_row("Auth token", "OPTIONAL", "No token set -> requests are sent without Authorization")
    timeout = f"{settings.http_timeout_seconds}s" if settings.http_timeout_seconds else "httpx default"
    table.add_row("HTTP timeout", "OK", timeout)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_health(settings))
    table.add_row("API health", "OK" if ok_http else "FAIL", detail_http)

    # Deployment descriptor
    try:
        descriptor = load_deployment(settings.deployment_path)
        table.add_row("Deploy descriptor", "OK", f"{settings.deployment_path} ({descriptor.service.name})")
    except DeploymentConfigError as exc:
        table.add_row("Deploy descriptor", "FAIL", str(exc).splitlines()[0])

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set MORPHIK_DOCS_API_BASE_URL or run `doctor setup` to point at a running API."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores base URL/token in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    token = typer.prompt("Auth token (empty for none)", default="", hide_input=True, show_default=False).strip()

    if not base_url:
        raise typer.BadParameter("base_url is required")

    env_path = write_user_env_vars(
        {
            "MORPHIK_DOCS_API_BASE_URL": base_url.rstrip("/"),
            "MORPHIK_DOCS_AUTH_TOKEN": token or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
