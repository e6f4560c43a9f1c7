"""Resolución de material de certificados: ruta o PEM en línea.

El mismo campo de configuración puede traer una referencia (ruta a fichero)
o el propio material. Orden de intentos:

1. Leer el valor como ruta. Si existe, se devuelven sus bytes tal cual.
2. Si la ruta no existe, el valor tiene que ser un bloque PEM bien formado.
3. Cualquier otro fallo de lectura (permisos, directorio, I/O) es un error:
   no se intenta interpretar como PEM.
"""

from __future__ import annotations

import base64
import binascii
import errno
import re
from pathlib import Path

from core.domain.errors import CertificateMaterialError

_PEM_BLOCK = re.compile(
    r"-----BEGIN ([^\r\n-]*)-----\r?\n(.*?)-----END \1-----",
    re.DOTALL,
)

# "No existe" incluye ENAMETOOLONG además de ENOENT: un PEM en línea largo
# falla así al leerse como ruta.
_NOT_A_PATH = frozenset({errno.ENOENT, errno.ENAMETOOLONG})


def is_valid_pem(value: str) -> bool:
    """True si `value` contiene al menos un bloque PEM decodificable."""

    for match in _PEM_BLOCK.finditer(value):
        body = match.group(2)
        lines = body.splitlines()
        # Cabeceras RFC 1421 opcionales ("Proc-Type: ...") antes del base64.
        if any(":" in line for line in lines):
            lines = [line for line in lines if ":" not in line]
        payload = "".join(line.strip() for line in lines)
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            continue
        return True
    return False


def _read_path(value: str) -> bytes | None:
    """Bytes del fichero, o None si `value` no apunta a nada existente."""

    try:
        return Path(value).read_bytes()
    except OSError as exc:
        if exc.errno in _NOT_A_PATH:
            return None
        raise
    except ValueError:
        # Bytes nulos en el valor: no puede ser una ruta.
        return None


def resolve_pem_bytes(name: str, value: str) -> bytes:
    """Devuelve el material PEM de `value` para el campo `name`."""

    try:
        data = _read_path(value)
    except OSError as exc:
        raise CertificateMaterialError(name, f"failed to read {name!r} file: {exc}") from exc

    if data is not None:
        return data

    if not is_valid_pem(value):
        raise CertificateMaterialError(
            name,
            f"provided {name!r} value is neither a valid file path nor a valid pem encoded string",
        )
    return value.encode("utf-8")
