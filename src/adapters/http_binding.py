"""Binding de salida HTTP.

Traduce una invocación genérica (operación + payload + metadata string) en
una única petición HTTP contra la URL base configurada, y la respuesta HTTP
de vuelta al mismo sobre genérico.

Convenciones de metadata por llamada:
- `path`: sufijo que se une a la URL base.
- `errorIfNot2XX`: override del modo estricto para esta llamada.
- `traceparent` / `tracestate`: se inyectan como cabeceras de trazas.
- Cualquier clave que empiece por mayúscula se envía como cabecera HTTP; las
  claves en minúscula son metadata de control del binding y nunca se envían.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Mapping

import httpx
from pydantic import ValidationError

from adapters.http_client import REQUEST_TIMEOUT_SECONDS, build_async_client
from adapters.tls_config import TLSTrustConfig, build_tls_trust_config
from core.config import is_truthy
from core.domain.errors import (
    ConfigurationError,
    InvalidOperationError,
    InvalidPathError,
    UnexpectedStatusError,
)
from core.domain.models import (
    HTTPBindingMetadata,
    InvokeRequest,
    InvokeResponse,
    InvokeResult,
    OperationKind,
)

PATH_METADATA_KEY = "path"
ERROR_IF_NOT_2XX_KEY = "errorIfNot2XX"
TRACEPARENT_HEADER_KEY = "traceparent"
TRACESTATE_HEADER_KEY = "tracestate"

DEFAULT_CONTENT_TYPE = "application/json; charset=utf-8"
DEFAULT_ACCEPT = "application/json; charset=utf-8"

_BODY_METHODS = frozenset({"PUT", "POST", "PATCH"})
_BODYLESS_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS", "TRACE"})
_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+\Z")

log = logging.getLogger(__name__)


def build_url(base: str, path: str) -> str:
    """Une `base` y `path` con una sola barra y rechaza cualquier `..`.

    La comprobación es por substring sobre la URL resultante, no una
    normalización de rutas: `a..b` también se rechaza.
    """

    url = f"{base.rstrip('/')}/{path.lstrip('/')}"
    if ".." in url:
        raise InvalidPathError(path)
    return url


def resolve_method(operation: str) -> str:
    method = operation.upper()
    if method == OperationKind.CREATE.value.upper():
        method = "POST"
    if method not in _BODY_METHODS and method not in _BODYLESS_METHODS:
        raise InvalidOperationError(operation)
    return method


def is_header_key(key: str) -> bool:
    """Las claves de metadata que empiezan por mayúscula son cabeceras."""

    return bool(key) and key[0].isupper()


def _set_trace_header(headers: httpx.Headers, metadata: Mapping[str, str], key: str) -> None:
    value = metadata.get(key)
    if not value:
        return
    if key in headers:
        log.warning("tracing enabled, overwriting %s in request headers", key.capitalize())
    headers[key] = value


def build_headers(metadata: Mapping[str, str], *, has_body: bool) -> httpx.Headers:
    headers = httpx.Headers()
    if has_body and "Content-Type" not in metadata:
        headers["Content-Type"] = DEFAULT_CONTENT_TYPE
    if "Accept" not in metadata:
        headers["Accept"] = DEFAULT_ACCEPT

    for key, value in metadata.items():
        if is_header_key(key):
            headers[key] = value

    _set_trace_header(headers, metadata, TRACEPARENT_HEADER_KEY)
    _set_trace_header(headers, metadata, TRACESTATE_HEADER_KEY)
    return headers


def canonical_header_key(key: str) -> str:
    """Forma canónica `X-Foo-Bar`; claves con caracteres no-token quedan igual."""

    if not _TOKEN.match(key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def response_metadata(response: httpx.Response) -> dict[str, str]:
    """`statusCode`, `status` y las cabeceras de respuesta (multi-valor con `, `)."""

    metadata: dict[str, str] = {
        "statusCode": str(response.status_code),
        "status": f"{response.status_code} {response.reason_phrase}".rstrip(),
    }

    values: dict[str, list[str]] = {}
    for raw_key, raw_value in response.headers.raw:
        key = canonical_header_key(raw_key.decode(response.headers.encoding))
        values.setdefault(key, []).append(raw_value.decode(response.headers.encoding))

    for key, items in values.items():
        metadata[key] = ", ".join(items)
    return metadata


class HTTPSource:
    """Binding para invocar un endpoint HTTP.

    `init` se ejecuta una vez y deja un cliente compartido (seguro para uso
    concurrente); cada `invoke` es una única ida y vuelta sin reintentos.
    """

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport
        self.metadata: HTTPBindingMetadata | None = None
        self.tls: TLSTrustConfig | None = None
        self.error_if_not_2xx = True
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPSource":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def mtls_enabled(self) -> bool:
        return self.tls is not None and self.tls.usable

    def init(self, properties: Mapping[str, str]) -> None:
        try:
            metadata = HTTPBindingMetadata.model_validate(dict(properties))
        except ValidationError as exc:
            raise ConfigurationError(f"invalid http binding metadata: {exc}") from exc

        tls: TLSTrustConfig | None = None
        if metadata.mtls_requested:
            tls = build_tls_trust_config(metadata)

        if ERROR_IF_NOT_2XX_KEY in properties:
            error_if_not_2xx = is_truthy(properties[ERROR_IF_NOT_2XX_KEY])
        else:
            error_if_not_2xx = True

        client = build_async_client(tls, transport=self._transport)

        self.metadata = metadata
        self.tls = tls
        self.error_if_not_2xx = error_if_not_2xx
        self._client = client
        log.debug("http binding initialised url=%s mtls=%s", metadata.url, self.mtls_enabled)

    def operations(self) -> list[OperationKind]:
        return list(OperationKind)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def invoke(self, request: InvokeRequest, *, timeout: float | None = None) -> InvokeResult:
        """Ejecuta `request` contra el endpoint configurado.

        Errores de construcción (operación, path) y de transporte se lanzan.
        Con el modo estricto activo, un no-2xx devuelve la respuesta completa
        *y* un `UnexpectedStatusError` en el mismo resultado.

        `timeout` es el plazo del llamador; gana el menor entre él y el tope
        fijo de la petición.
        """

        if self._client is None or self.metadata is None:
            raise ConfigurationError("http binding is not initialised")

        metadata = request.metadata
        url = self.metadata.url
        if PATH_METADATA_KEY in metadata:
            url = build_url(url, metadata[PATH_METADATA_KEY])

        error_if_not_2xx = self.error_if_not_2xx
        if ERROR_IF_NOT_2XX_KEY in metadata:
            error_if_not_2xx = is_truthy(metadata[ERROR_IF_NOT_2XX_KEY])

        method = resolve_method(request.operation)
        has_body = method in _BODY_METHODS

        http_request = self._client.build_request(
            method,
            url,
            content=request.data if has_body else None,
            headers=build_headers(metadata, has_body=has_body),
        )

        limit = REQUEST_TIMEOUT_SECONDS if timeout is None else min(timeout, REQUEST_TIMEOUT_SECONDS)
        status_code, response = await asyncio.wait_for(
            self._round_trip(self._client, http_request),
            timeout=limit,
        )

        error: UnexpectedStatusError | None = None
        if error_if_not_2xx and status_code // 100 != 2:
            error = UnexpectedStatusError(status_code, response)
        return InvokeResult(response=response, error=error)

    async def _round_trip(
        self, client: httpx.AsyncClient, http_request: httpx.Request
    ) -> tuple[int, InvokeResponse]:
        http_response = await client.send(http_request, stream=True)
        try:
            # 204 y similares dan b"", nunca None.
            body = await http_response.aread()
        finally:
            await http_response.aclose()

        return http_response.status_code, InvokeResponse(
            data=body,
            metadata=response_metadata(http_response),
        )
