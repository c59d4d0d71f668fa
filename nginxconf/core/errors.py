"""
Errores de nginxconf.

El core solo define excepciones; las capas (CLI/engine) se encargan del formato de salida.
"""

from typing import Optional


class NginxConfError(Exception):
    """Error base de nginxconf."""
    pass


class ConfigError(NginxConfError):
    """Error de configuración (archivo faltante, formato inválido)."""
    pass


class ProviderError(NginxConfError):
    """Error delegado desde el provider remoto (SSH, comandos, estado)."""
    pass


class RemoteConnectionError(ProviderError, ConnectionError):
    """No se pudo alcanzar el host o falló el handshake SSH."""

    def __init__(self, host: str, reason: str):
        super().__init__(f"No se pudo conectar a {host}: {reason}")
        self.host = host
        self.reason = reason


class AuthenticationError(ProviderError):
    """El servidor rechazó las credenciales."""

    def __init__(self, host: str, user: str):
        super().__init__(f"Credenciales rechazadas para {user}@{host}")
        self.host = host
        self.user = user


class CommandExecutionError(ProviderError):
    """
    Un comando remoto terminó con código distinto de cero o el transporte
    falló a mitad de la ejecución.

    Conserva el comando y la salida combinada (stdout+stderr) para diagnóstico.
    """

    def __init__(self, command: str, output: str = "", exit_status: Optional[int] = None):
        detail = f"código {exit_status}" if exit_status is not None else "sin código de salida"
        message = f"Falló el comando '{command}' ({detail})"
        if output.strip():
            message += f": {output.strip()}"
        super().__init__(message)
        self.command = command
        self.output = output
        self.exit_status = exit_status


class CommandTimeoutError(CommandExecutionError):
    """El comando no terminó antes del deadline; el canal se cerró a la fuerza."""

    def __init__(self, command: str, timeout: float, output: str = ""):
        super().__init__(command, output, None)
        self.timeout = timeout

    def __str__(self) -> str:
        return f"Timeout ({self.timeout}s) ejecutando '{self.command}'"


class ResourceOperationError(ProviderError):
    """Fallo de una operación del recurso (create/read/update/delete) sobre un path."""

    def __init__(self, operation: str, path: str, cause: Optional[BaseException] = None):
        message = f"Error en {operation} de {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.operation = operation
        self.path = path
        self.cause = cause


class StateInconsistencyError(ProviderError):
    """El estado remoto contradice lo recién aplicado (p. ej. un .conf recién creado no se puede leer)."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Estado inconsistente en {path}: {reason}")
        self.path = path
        self.reason = reason


class ResourceAbsentSignal(NginxConfError):
    """
    Señal (no error): el archivo remoto no existe.

    El engine debe descartar el estado o recrear el recurso; nunca se confunde
    con CommandExecutionError.
    """

    def __init__(self, path: str):
        super().__init__(f"El recurso no existe en el host: {path}")
        self.path = path
