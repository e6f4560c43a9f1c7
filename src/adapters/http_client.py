"""Wrapper de httpx.

Por qué un wrapper:
- El cliente por defecto no tiene límites útiles; aquí se fijan los timeouts
  operativos (no son configurables) para todas las invocaciones.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from adapters.tls_config import TLSTrustConfig

DIAL_TIMEOUT_SECONDS = 5.0
TLS_HANDSHAKE_TIMEOUT_SECONDS = 5.0
REQUEST_TIMEOUT_SECONDS = 30.0


def build_timeout() -> httpx.Timeout:
    """Timeouts por fase.

    httpx mide el handshake TLS dentro de `connect`, así que ese límite cubre
    a la vez el dial y el handshake. El tope total de la petición lo aplica el
    binding alrededor de la ida y vuelta completa.
    """

    return httpx.Timeout(
        REQUEST_TIMEOUT_SECONDS,
        connect=max(DIAL_TIMEOUT_SECONDS, TLS_HANDSHAKE_TIMEOUT_SECONDS),
    )


def build_async_client(
    tls: TLSTrustConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    La configuración TLS solo se aplica si es utilizable (par cliente + CAs
    propias); en otro caso se usa la confianza por defecto del sistema.
    """

    verify: object = True
    if tls is not None and tls.usable:
        verify = tls.context

    return httpx.AsyncClient(
        timeout=build_timeout(),
        follow_redirects=True,
        verify=verify,  # type: ignore[arg-type]
        transport=transport,
    )
