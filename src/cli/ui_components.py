"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `invoke`, `operations` y `doctor`.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import InvokeResponse, OperationKind


def build_response_table(response: InvokeResponse) -> Table:
    """Tabla con `statusCode`, `status` y las cabeceras de respuesta."""

    style = "green" if response.ok else "red"
    table = Table(title=Text(response.metadata.get("status", "?"), style=f"bold {style}"))
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    for key in ("statusCode", "status"):
        if key in response.metadata:
            table.add_row(key, response.metadata[key])
    for key in sorted(k for k in response.metadata if k not in ("statusCode", "status")):
        table.add_row(key, response.metadata[key])
    return table


def build_body_panel(response: InvokeResponse) -> Panel:
    """Panel con el body; si no es texto se muestra solo el tamaño."""

    if not response.data:
        body = Text("(empty body)", style="dim")
    else:
        try:
            body = Text(response.data.decode("utf-8"))
        except UnicodeDecodeError:
            body = Text(f"<{len(response.data)} bytes of binary data>", style="dim")
    return Panel(body, title="Body", border_style="magenta")


def build_operations_table(operations: list[OperationKind]) -> Table:
    table = Table(title="Supported operations")
    table.add_column("Operation", style="bright_green", no_wrap=True)
    table.add_column("HTTP method", style="white")
    for op in operations:
        method = "POST" if op is OperationKind.CREATE else op.value.upper()
        table.add_row(op.value, method)
    return table
