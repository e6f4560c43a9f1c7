"""Configuración de logging para los entrypoints.

Los módulos solo piden `logging.getLogger(__name__)`; quién decide handlers y
nivel es la CLI, que usa Rich para mantener la misma estética que el resto de
la salida.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str | int = "WARNING", *, console: Console | None = None) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
