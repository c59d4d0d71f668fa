"""
Resolución de rutas de estado y configuración.

- state_root(): directorio del estado persistido por la CLI (/var/lib/nginxconf/).
- config_path(): archivo YAML con los parámetros del provider.

El core NO escribe en disco; solo expone estas rutas.
"""

import os
from pathlib import Path


# Ruta canónica del estado (fuera del repo)
NGINXCONF_STATE_ROOT = Path("/var/lib/nginxconf")

# Config del provider por defecto
NGINXCONF_CONFIG_FILE = Path("~/.nginxconf/provider.yaml")


def state_root() -> Path:
    """
    Directorio raíz del estado.
    NGINXCONF_STATE_DIR tiene prioridad sobre /var/lib/nginxconf/.
    """
    explicit = os.environ.get("NGINXCONF_STATE_DIR", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return NGINXCONF_STATE_ROOT


def config_path() -> Path:
    """Archivo de configuración del provider (NGINXCONF_CONFIG o ~/.nginxconf/provider.yaml)."""
    explicit = os.environ.get("NGINXCONF_CONFIG", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return NGINXCONF_CONFIG_FILE.expanduser()
