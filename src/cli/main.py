"""CLI de http-binding (Typer + Rich).

Por qué una CLI:
- Permite probar un endpoint (y su configuración mTLS) con el mismo código
  que usan los consumidores del binding.
- La salida (tablas/paneles) vive en `cli.ui_components`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import typer
from rich.console import Console

from adapters.http_binding import HTTPSource
from cli import doctor
from cli.ui_components import build_body_panel, build_operations_table, build_response_table
from core.config import AppSettings
from core.domain.errors import BindingError, UnexpectedStatusError
from core.domain.models import InvokeRequest, InvokeResult
from core.log import configure_logging

app = typer.Typer(no_args_is_help=True, help="Invoke HTTP endpoints through the generic binding envelope.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _parse_metadata(items: list[str]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise typer.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--meta")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"empty key in {item!r}", param_hint="--meta")
        metadata[key] = value
    return metadata


async def _invoke(properties: dict[str, str], request: InvokeRequest, timeout: float | None) -> InvokeResult:
    async with HTTPSource() as source:
        source.init(properties)
        return await source.invoke(request, timeout=timeout)


@app.command()
def invoke(
    operation: str = typer.Argument(..., help="Operation: get, head, post, put, patch, delete, options, trace, create."),
    url: str | None = typer.Option(None, "--url", help="Base URL (defaults to HTTP_BINDING_URL)."),
    path: str | None = typer.Option(None, "--path", "-p", help="Path appended to the base URL."),
    data: str | None = typer.Option(None, "--data", "-d", help="Request payload."),
    data_file: Path | None = typer.Option(None, "--data-file", exists=True, dir_okay=False, help="Read the payload from a file."),
    meta: list[str] = typer.Option([], "--meta", "-m", help="Metadata entry KEY=VALUE (upper-case keys become headers)."),
    allow_non_2xx: bool = typer.Option(False, "--allow-non-2xx", help="Do not treat non-2xx responses as errors."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.1, help="Caller deadline in seconds."),
) -> None:
    """Send one invocation and print the response envelope."""

    settings = AppSettings()
    configure_logging(settings.log_level)

    properties = settings.to_properties()
    if url:
        properties["url"] = url
    if "url" not in properties:
        raise typer.BadParameter("no base URL: pass --url or set HTTP_BINDING_URL", param_hint="--url")

    metadata = _parse_metadata(meta)
    if path is not None:
        metadata["path"] = path
    if allow_non_2xx:
        metadata["errorIfNot2XX"] = "false"

    payload = data_file.read_bytes() if data_file else (data or "").encode("utf-8")
    request = InvokeRequest(operation=operation, data=payload, metadata=metadata)

    try:
        result = asyncio.run(_invoke(properties, request, timeout))
    except (BindingError, httpx.HTTPError, asyncio.TimeoutError, TimeoutError) as exc:
        _console.print(f"[red]Error:[/red] {exc or type(exc).__name__}")
        raise typer.Exit(code=1) from exc

    if result.response is not None:
        _console.print(build_response_table(result.response))
        _console.print(build_body_panel(result.response))
    if isinstance(result.error, UnexpectedStatusError):
        _console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(code=1)


@app.command()
def operations() -> None:
    """List the supported operations and the HTTP method each maps to."""

    _console.print(build_operations_table(HTTPSource().operations()))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
