"""
Core: modelos, errores, estado y planificación.

ENFORCEMENT (arquitectura limpia):
- Este paquete NO debe importar: nginxconf.cli, nginxconf.transport.ssh
  ni nginxconf.providers.*.
- Permitido: typing, pydantic, nginxconf.core.*.
- Los providers y la CLI importan desde core; nunca al revés.
"""

from nginxconf.core.errors import (
    NginxConfError,
    ProviderError,
    ConfigError,
    ResourceAbsentSignal,
)

__all__ = ["NginxConfError", "ProviderError", "ConfigError", "ResourceAbsentSignal"]
