"""
Modelos de datos de nginxconf (agnósticos de interfaz y transporte)
Usa Pydantic para validación y serialización
"""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


DEFAULT_STAGING_PATH = "/tmp/nginx_temp.conf"


def _require_absolute(value: str) -> str:
    if not value or not value.startswith("/"):
        raise ValueError(f"El path remoto debe ser absoluto: {value!r}")
    return value


class DesiredSpec(BaseModel):
    """Estado deseado del recurso (lo que declara el operador)"""
    server_name: str = Field(..., description="server_name de NGINX")
    listen_port: int = Field(..., description="Puerto de escucha")
    root: str = Field(..., description="Directorio raíz del sitio")
    path: str = Field(..., description="Ruta absoluta del .conf en el host remoto")
    content: Optional[str] = Field(None, description="Contenido real/override del .conf")

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        return _require_absolute(value)

    @field_validator("listen_port")
    @classmethod
    def _port_in_range(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"Puerto fuera de rango: {value}")
        return value


class ResourceState(BaseModel):
    """
    Estado conocido del recurso.

    Invariante: id == path. Un estado sin archivo remoto se considera ausente,
    no "vacío"; por eso Delete devuelve None en lugar de un estado sin contenido.
    """
    id: str
    path: str
    content: str = ""
    # Campos estructurados tal como se aplicaron en Create (solo informativos)
    server_name: Optional[str] = None
    listen_port: Optional[int] = None
    root: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_id_path(cls, data):
        if isinstance(data, dict):
            if data.get("path") is None and data.get("id") is not None:
                data = {**data, "path": data["id"]}
            elif data.get("id") is None and data.get("path") is not None:
                data = {**data, "id": data["path"]}
        return data

    @model_validator(mode="after")
    def _id_equals_path(self) -> "ResourceState":
        if self.id != self.path:
            raise ValueError(f"id ({self.id}) debe ser igual a path ({self.path})")
        return self


class ProviderConfig(BaseModel):
    """Parámetros de conexión del provider (sesión SSH compartida)"""
    host: str = Field(..., description="Hostname o IP del servidor NGINX")
    user: str = Field(..., description="Usuario SSH")
    password: SecretStr = Field(..., description="Contraseña SSH")
    port: int = Field(22, description="Puerto SSH")
    connect_timeout: float = Field(10.0, description="Timeout de conexión en segundos")
    command_timeout: Optional[float] = Field(30.0, description="Deadline por comando en segundos")
    staging_path: str = Field(DEFAULT_STAGING_PATH, description="Ruta temporal para el staging en Create")
    use_sudo: bool = Field(True, description="Prefijar sudo al mover el .conf a su destino")
    verify: bool = Field(False, description="Releer el .conf después de Create")

    @field_validator("staging_path")
    @classmethod
    def _staging_is_absolute(cls, value: str) -> str:
        return _require_absolute(value)
