"""Errores del binding HTTP.

Taxonomía:
- Configuración: fatal en `init`, nunca hay inicialización parcial.
- Construcción de la petición: falla antes de cualquier I/O de red.
- Estado HTTP: se devuelve junto a la respuesta completa (modo estricto).

Los errores de transporte (DNS, conexión, TLS, timeouts) son los de `httpx`
y se propagan sin envolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import InvokeResponse


class BindingError(Exception):
    """Base de todos los errores propios del binding."""


class ConfigurationError(BindingError):
    """Metadata malformada o material TLS inválido."""


class CertificateMaterialError(ConfigurationError):
    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class InvalidOperationError(BindingError):
    def __init__(self, operation: str) -> None:
        super().__init__(f"invalid operation: {operation}")
        self.operation = operation


class InvalidPathError(BindingError):
    def __init__(self, path: str) -> None:
        super().__init__(f"invalid path: {path}")
        self.path = path


class UnexpectedStatusError(BindingError):
    """Respuesta no-2xx con `errorIfNot2XX` activo.

    La respuesta viaja con el error: el cuerpo de un 4xx/5xx suele ser
    justamente lo que el llamador necesita inspeccionar.
    """

    def __init__(self, status_code: int, response: InvokeResponse | None = None) -> None:
        super().__init__(f"received status code {status_code}")
        self.status_code = status_code
        self.response = response
