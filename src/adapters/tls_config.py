"""Construcción de la configuración de confianza mTLS.

Se construye una sola vez en `init`. Cualquier material inválido aborta la
inicialización: un par cert/key que no casa o una CA que no aporta ningún
certificado nunca se degradan a "sin mTLS" en silencio.
"""

from __future__ import annotations

import logging
import ssl
import tempfile
from dataclasses import dataclass
from pathlib import Path

from adapters.pem_material import resolve_pem_bytes
from core.domain.errors import ConfigurationError
from core.domain.models import HTTPBindingMetadata

MTLS_CLIENT_CERT = "MTLSClientCert"
MTLS_CLIENT_KEY = "MTLSClientKey"
MTLS_ROOT_CA = "MTLSRootCA"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TLSTrustConfig:
    """Contexto TLS con cero-o-un par cliente y cero-o-un pool de CAs propio."""

    context: ssl.SSLContext
    has_client_certificate: bool = False
    has_root_cas: bool = False

    @property
    def usable(self) -> bool:
        # Solo se aplica al transporte con par cliente y CAs propias a la vez.
        return self.has_client_certificate and self.has_root_cas


def _no_password() -> bytes:
    # Evita que OpenSSL pida la passphrase por TTY con claves cifradas.
    return b""


def _load_key_pair(context: ssl.SSLContext, cert: bytes, key: bytes) -> None:
    # `load_cert_chain` solo acepta rutas: se materializa en un tmpdir privado.
    with tempfile.TemporaryDirectory(prefix="http-binding-") as tmp:
        cert_path = Path(tmp) / "client.crt"
        key_path = Path(tmp) / "client.key"
        cert_path.write_bytes(cert)
        key_path.write_bytes(key)
        try:
            context.load_cert_chain(cert_path, key_path, password=_no_password)
        except (ssl.SSLError, OSError, ValueError) as exc:
            raise ConfigurationError(f"failed to load client certificate: {exc}") from exc


def _load_root_cas(context: ssl.SSLContext, ca: bytes) -> None:
    try:
        context.load_verify_locations(cadata=ca.decode("utf-8"))
    except (ssl.SSLError, UnicodeDecodeError, ValueError) as exc:
        raise ConfigurationError("failed to add root certificate to certpool") from exc
    # Cuenta cualquier certificado cargado, no solo los marcados como CA.
    if context.cert_store_stats()["x509"] == 0:
        raise ConfigurationError("failed to add root certificate to certpool")


def build_tls_trust_config(metadata: HTTPBindingMetadata) -> TLSTrustConfig:
    """Resuelve cert/key/CA del endpoint y construye el contexto TLS."""

    if not metadata.mtls_requested:
        raise ConfigurationError("mutual TLS requires both a client certificate and a client key")

    cert = resolve_pem_bytes(MTLS_CLIENT_CERT, metadata.mtls_client_cert or "")
    key = resolve_pem_bytes(MTLS_CLIENT_KEY, metadata.mtls_client_key or "")

    # Trust store vacío a propósito: solo las CAs configuradas son de confianza.
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    _load_key_pair(context, cert, key)

    has_root_cas = False
    if metadata.mtls_root_ca:
        ca = resolve_pem_bytes(MTLS_ROOT_CA, metadata.mtls_root_ca)
        _load_root_cas(context, ca)
        has_root_cas = True

    config = TLSTrustConfig(context=context, has_client_certificate=True, has_root_cas=has_root_cas)
    if not config.usable:
        log.info("mTLS client certificate loaded without a root CA; using default trust")
    return config
