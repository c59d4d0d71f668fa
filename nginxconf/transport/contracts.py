"""
Contratos del canal de comandos remotos.

El controller solo depende de este Protocol; la implementación SSH vive en
transport/ssh.py y los tests usan canales falsos.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from nginxconf.core.errors import CommandExecutionError


@dataclass
class CommandResult:
    """Resultado de un único comando remoto (se consume inmediatamente)"""
    command: str
    output: bytes
    succeeded: bool
    cause: Optional[Exception] = None
    exit_status: Optional[int] = None

    @property
    def text(self) -> str:
        """Salida combinada como UTF-8; los bytes inválidos se conservan (surrogateescape)."""
        return self.output.decode("utf-8", errors="surrogateescape")

    def check(self) -> str:
        """Devuelve la salida o lanza la causa del fallo."""
        if self.succeeded:
            return self.text
        if self.cause is not None:
            raise self.cause
        raise CommandExecutionError(self.command, self.text, self.exit_status)


class CommandChannel(Protocol):
    """
    Contrato mínimo de un canal remoto.
    Cada llamada a run() es un contexto de ejecución independiente
    (sin variables de entorno ni directorio de trabajo compartidos).
    """
    def run(self, command: str, timeout: Optional[float] = None) -> CommandResult:
        """Ejecuta un comando y devuelve su resultado (nunca reintenta)."""
        ...
