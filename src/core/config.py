"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El pipeline recibe un `AppSettings` explícito: si falta la cuenta, el token
  o el directorio de salida, falla al construirlo y no a mitad de ejecución.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


_APP_DIR = "model-docs"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario.

    Linux respeta `XDG_CONFIG_HOME`; macOS y Windows usan su ubicación nativa.
    """

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home()))) / _APP_DIR
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / _APP_DIR
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / _APP_DIR


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Fusiona `values` en el .env del usuario y devuelve su ruta.

    Las claves existentes se conservan salvo que `values` las sobrescriba;
    el fichero se reescribe ordenado por clave.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = {k: v for k, v in dotenv_values(env_path).items() if v is not None} if env_path.exists() else {}
    merged.update({k: v for k, v in values.items() if v is not None})

    body = "".join(f"{key}={merged[key]}\n" for key in sorted(merged))
    env_path.write_text(f"# model-docs user config (.env)\n{body}", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters/pipeline.
    """

    model_config = SettingsConfigDict(
        env_prefix="MODEL_DOCS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    account_id: str = Field(
        ...,
        min_length=1,
        description="Account identifier que aloja el catálogo de modelos.",
    )
    auth_token: SecretStr = Field(
        ...,
        description="Bearer token con permiso de lectura sobre el catálogo.",
    )
    output_root: Path = Field(
        ...,
        description="Directorio de contenido donde se escriben los documentos.",
    )
    filter_experimental: bool = Field(
        default=False,
        description="Excluir modelos etiquetados como `experimental`.",
    )

    api_base_url: str = Field(
        default="https://api.cloudflare.com/client/v4",
        min_length=8,
        description="Base URL de la API REST.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="model-docs/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones a la API.",
    )

    schema_batch_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Peticiones de schema simultáneas por lote.",
    )
    document_extension: str = Field(
        default="md",
        min_length=1,
        description="Extensión de los documentos generados (sin punto).",
    )
    document_body: str = Field(
        default="",
        description="Texto opcional tras el front matter de cada documento.",
    )
    extra_denylist: list[str] = Field(
        default_factory=list,
        description="Identificadores adicionales que nunca se documentan.",
    )
    task_schemas_path: Path | None = Field(
        default=None,
        description="JSON local {task_type: {input, output}}; activa schemas por tipo de tarea.",
    )
