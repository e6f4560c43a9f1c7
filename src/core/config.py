"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El binding en sí recibe un mapa de strings (`init(properties)`); estos
  settings solo sirven para construir ese mapa desde el entorno.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUTHY = frozenset({"1", "t", "true", "y", "yes", "on"})


def is_truthy(value: str | None) -> bool:
    """Interpreta un string de metadata como booleano (`yes`, `on`, `1`…)."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "http-binding"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "http-binding"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "http-binding"
    return Path.home() / ".config" / "http-binding"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# http-binding user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración del endpoint leída del entorno.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el binding.
    - Un único contrato de configuración para CLI y diagnósticos.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTP_BINDING_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    url: str | None = Field(
        default=None,
        description="URL base del endpoint HTTP.",
    )
    mtls_client_cert: str | None = Field(
        default=None,
        description="Certificado cliente mTLS (ruta o PEM en línea).",
    )
    mtls_client_key: str | None = Field(
        default=None,
        description="Clave privada del certificado cliente (ruta o PEM en línea).",
    )
    mtls_root_ca: str | None = Field(
        default=None,
        description="CA raíz para verificar al servidor (ruta o PEM en línea).",
    )
    error_if_not_2xx: bool | None = Field(
        default=None,
        description="Si es False, las respuestas no-2xx no se reportan como error.",
    )
    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging para la CLI.",
    )

    def to_properties(self) -> dict[str, str]:
        """Mapa de propiedades crudo que consume `HTTPSource.init`."""

        props: dict[str, str] = {}
        if self.url:
            props["url"] = self.url
        if self.mtls_client_cert:
            props["mtlsClientCert"] = self.mtls_client_cert
        if self.mtls_client_key:
            props["mtlsClientKey"] = self.mtls_client_key
        if self.mtls_root_ca:
            props["mtlsRootCA"] = self.mtls_root_ca
        if self.error_if_not_2xx is not None:
            props["errorIfNot2XX"] = "true" if self.error_if_not_2xx else "false"
        return props
