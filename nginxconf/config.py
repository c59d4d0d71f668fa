"""
Carga de configuración: provider (conexión SSH) y recursos declarados

Orden de resolución del provider:
1. Archivo YAML (NGINXCONF_CONFIG o ~/.nginxconf/provider.yaml)
2. Variables de entorno NGINXCONF_* (también desde .env), que tienen prioridad
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from nginxconf.core.errors import ConfigError
from nginxconf.core.models import DesiredSpec, ProviderConfig
from nginxconf.core.runtime.resolver import config_path


# Variable de entorno -> campo de ProviderConfig
ENV_OVERRIDES = {
    "NGINXCONF_HOST": "host",
    "NGINXCONF_USER": "user",
    "NGINXCONF_PASSWORD": "password",
    "NGINXCONF_PORT": "port",
}


def load_env_file(base_dir: Optional[Path] = None) -> bool:
    """Carga .env del directorio indicado (o cwd) sin pisar variables ya definidas."""
    env_file = (base_dir or Path.cwd()) / ".env"
    if not env_file.exists():
        return False
    return load_dotenv(env_file, override=False)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML inválido en {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"No se pudo leer {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} debe contener un mapping YAML")
    return data


def load_provider_config(path: Optional[Path] = None) -> ProviderConfig:
    """
    Construye ProviderConfig desde YAML + entorno

    Args:
        path: Archivo YAML explícito; si no existe se usa solo el entorno

    Returns:
        ProviderConfig validado

    Raises:
        ConfigError: faltan campos requeridos o el YAML es inválido
    """
    source = path or config_path()
    data: Dict[str, Any] = {}
    if source.exists():
        data = _read_yaml(source)
        # Permitir el bloque anidado `provider:`
        if isinstance(data.get("provider"), dict):
            data = data["provider"]
    elif path is not None:
        raise ConfigError(f"No existe el archivo de configuración: {path}")

    for env_var, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_var, "").strip()
        if value:
            data[field] = value

    try:
        return ProviderConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Configuración del provider inválida ({source}): {e}") from e


def load_desired_spec(path: Path) -> DesiredSpec:
    """
    Carga un recurso nginx_conf declarado en YAML

    Acepta los campos en la raíz o bajo la clave `nginx_conf:`.
    """
    if not path.exists():
        raise ConfigError(f"No existe el archivo del recurso: {path}")
    data = _read_yaml(path)
    if isinstance(data.get("nginx_conf"), dict):
        data = data["nginx_conf"]
    try:
        return DesiredSpec(**data)
    except ValidationError as e:
        raise ConfigError(f"Recurso inválido en {path}: {e}") from e
