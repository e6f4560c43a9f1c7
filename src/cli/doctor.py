"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_binding import HTTPSource
from adapters.pem_material import resolve_pem_bytes
from adapters.tls_config import MTLS_CLIENT_CERT, MTLS_CLIENT_KEY, MTLS_ROOT_CA
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import BindingError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_material(name: str, value: str | None) -> tuple[str, str]:
    if not value:
        return "UNSET", "-"
    try:
        data = resolve_pem_bytes(name, value)
    except BindingError as exc:
        return "FAIL", str(exc)
    return "OK", f"{len(data)} bytes"


def _check_init(settings: AppSettings) -> tuple[bool, str, bool]:
    source = HTTPSource()
    try:
        source.init(settings.to_properties())
    except BindingError as exc:
        return False, str(exc), False
    mtls = source.mtls_enabled
    asyncio.run(source.aclose())
    return True, "OK", mtls


@app.command()
def run() -> None:
    """Resolve the configured endpoint and TLS material without sending requests."""

    settings = AppSettings()

    table = Table(title="http-binding Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("URL", "OK" if settings.url else "FAIL", settings.url or "HTTP_BINDING_URL is not set")
    for name, value in (
        (MTLS_CLIENT_CERT, settings.mtls_client_cert),
        (MTLS_CLIENT_KEY, settings.mtls_client_key),
        (MTLS_ROOT_CA, settings.mtls_root_ca),
    ):
        status, detail = _check_material(name, value)
        table.add_row(name, status, detail)

    ok_init, detail_init, mtls = _check_init(settings)
    table.add_row("Binding init", "OK" if ok_init else "FAIL", detail_init)
    if ok_init:
        table.add_row("Mutual TLS", "ON" if mtls else "OFF", "applied to transport" if mtls else "default trust")

    _console.print(table)

    if not ok_init:
        raise typer.Exit(code=1)


@app.command(name="configure")
def configure() -> None:
    """Interactive endpoint setup (stores config in the user config .env)."""

    url = typer.prompt("Endpoint base URL").strip()
    cert = typer.prompt("mTLS client certificate (path or PEM, empty to skip)", default="", show_default=False).strip()
    key = typer.prompt("mTLS client key (path or PEM, empty to skip)", default="", show_default=False).strip()
    ca = typer.prompt("mTLS root CA (path or PEM, empty to skip)", default="", show_default=False).strip()

    if not url:
        raise typer.BadParameter("url is required")
    if bool(cert) != bool(key):
        _console.print("[yellow]Only one of certificate/key given: mutual TLS will stay disabled.[/yellow]")

    values = {"HTTP_BINDING_URL": url}
    for env_key, value in (
        ("HTTP_BINDING_MTLS_CLIENT_CERT", cert),
        ("HTTP_BINDING_MTLS_CLIENT_KEY", key),
        ("HTTP_BINDING_MTLS_ROOT_CA", ca),
    ):
        if value:
            values[env_key] = value

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved endpoint config to:[/green] {env_path}")
