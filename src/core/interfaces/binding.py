"""Contrato de bindings de salida.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el binding HTTP por un doble en tests o en la CLI.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from core.domain.models import InvokeRequest, InvokeResult, OperationKind


@runtime_checkable
class OutputBinding(Protocol):
    """Contrato mínimo para un binding de salida.

    Reglas de diseño:
    - `init` se ejecuta una vez; cualquier fallo aborta la inicialización.
    - `invoke` es asíncrono porque hace I/O y puede cancelarse.
    """

    def init(self, properties: Mapping[str, str]) -> None:
        ...

    def operations(self) -> list[OperationKind]:
        ...

    async def invoke(self, request: InvokeRequest, *, timeout: float | None = None) -> InvokeResult:
        """Ejecuta una invocación y devuelve respuesta y error (si lo hay)."""

        ...

    async def aclose(self) -> None:
        ...
