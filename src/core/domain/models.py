"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- La metadata del binding llega como un mapa de strings sin tipar; validarla
  en el borde evita que una configuración malformada degrade en silencio.
- El sobre de invocación (request/response) es agnóstico del transporte:
  aquí no se habla de HTTP, solo de operación, payload y metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class OperationKind(str, Enum):
    """Operaciones aceptadas por el binding HTTP."""

    # Alias histórico de POST.
    CREATE = "create"
    GET = "get"
    HEAD = "head"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    TRACE = "trace"


class HTTPBindingMetadata(BaseModel):
    """Configuración del endpoint, inmutable tras `init`.

    Los campos mTLS aceptan tanto una ruta a un fichero PEM como el PEM en
    línea; la resolución vive en `adapters.pem_material`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    url: str = Field(
        ...,
        min_length=1,
        description="URL base contra la que se resuelven las invocaciones.",
    )
    mtls_client_cert: str | None = Field(
        default=None,
        alias="mtlsClientCert",
        description="Certificado cliente (ruta o PEM en línea).",
    )
    mtls_client_key: str | None = Field(
        default=None,
        alias="mtlsClientKey",
        description="Clave privada del certificado cliente (ruta o PEM en línea).",
    )
    mtls_root_ca: str | None = Field(
        default=None,
        alias="mtlsRootCA",
        description="CA raíz para verificar al servidor (ruta o PEM en línea).",
    )

    @property
    def mtls_requested(self) -> bool:
        # Sin cert o sin key no hay mTLS; nunca una configuración a medias.
        return bool(self.mtls_client_cert) and bool(self.mtls_client_key)


class InvokeRequest(BaseModel):
    """Petición genérica: operación + payload opaco + metadata string→string."""

    operation: str = Field(
        ...,
        description="Verbo de la operación (case-insensitive).",
    )
    data: bytes = Field(
        default=b"",
        description="Payload opaco; solo se envía como body en PUT/POST/PATCH.",
    )
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Pistas de enrutado, overrides y cabeceras (claves en mayúscula).",
    )

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class InvokeResponse(BaseModel):
    """Respuesta genérica: body crudo + metadata de estado y cabeceras."""

    data: bytes = Field(
        default=b"",
        description="Body de la respuesta; vacío (no None) para p.ej. 204.",
    )
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="`statusCode`, `status` y todas las cabeceras de respuesta.",
    )

    @property
    def status_code(self) -> int | None:
        raw = self.metadata.get("statusCode")
        return int(raw) if raw is not None else None

    @property
    def ok(self) -> bool:
        code = self.status_code
        return code is not None and code // 100 == 2


@dataclass
class InvokeResult:
    """Respuesta y error disponibles a la vez.

    En modo estricto un no-2xx produce `response` poblada *y* `error`; los
    demás fallos se lanzan como excepción y nunca llegan aquí.
    """

    response: InvokeResponse | None = None
    error: BaseException | None = None

    def raise_for_error(self) -> InvokeResponse | None:
        if self.error is not None:
            raise self.error
        return self.response
