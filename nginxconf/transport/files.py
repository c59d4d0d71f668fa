"""
Operaciones de archivo remotas estructuradas

Todo el protocolo de comandos (y su escapado) vive aquí; el controller nunca
arma cadenas de shell.
"""

import posixpath
import shlex
from dataclasses import dataclass
from typing import Optional, Union

from nginxconf.core.errors import CommandExecutionError
from nginxconf.transport.contracts import CommandChannel, CommandResult
from nginxconf.transport.encoder import single_quote


# Código de salida de `test` cuando la condición es falsa
_TEST_FALSE = 1


@dataclass(frozen=True)
class Found:
    """El archivo existe; content son sus bytes decodificados."""
    content: str


@dataclass(frozen=True)
class NotFound:
    """El path remoto no existe."""
    path: str


@dataclass(frozen=True)
class TransportFailure:
    """No se pudo leer por otra causa (permisos, conexión, timeout...)."""
    cause: Exception


ReadResult = Union[Found, NotFound, TransportFailure]


def write_command(path: str, content: str) -> str:
    """printf '%s' '<contenido>' > <path> (sin salto de línea agregado)."""
    return f"printf '%s' {single_quote(content)} > {shlex.quote(path)}"


def move_command(src: str, dst: str, privileged: bool = False) -> str:
    prefix = "sudo " if privileged else ""
    return f"{prefix}mv {shlex.quote(src)} {shlex.quote(dst)}"


def read_command(path: str) -> str:
    return f"cat {shlex.quote(path)}"


def exists_command(path: str) -> str:
    return f"test -e {shlex.quote(path)}"


def parent_searchable_command(path: str) -> str:
    """Éxito si el directorio padre se puede recorrer (o no existe como directorio)."""
    parent = shlex.quote(posixpath.dirname(path) or "/")
    return f"test -x {parent} -o ! -d {parent}"


def remove_command(path: str) -> str:
    return f"rm -f {shlex.quote(path)}"


class RemoteFiles:
    """Archivos remotos sobre un CommandChannel (una llamada = un comando)"""

    def __init__(self, channel: CommandChannel, timeout: Optional[float] = None):
        self.channel = channel
        self.timeout = timeout

    def _run(self, command: str) -> CommandResult:
        return self.channel.run(command, timeout=self.timeout)

    def write_file(self, path: str, content: str) -> None:
        """Escribe content en path tal cual (sobrescribe)."""
        self._run(write_command(path, content)).check()

    def move_file(self, src: str, dst: str, privileged: bool = False) -> None:
        """Mueve src a dst; privileged antepone sudo."""
        self._run(move_command(src, dst, privileged)).check()

    def read_file(self, path: str) -> ReadResult:
        """
        Lee el archivo completo

        Si `cat` falla se consulta `test -e` para distinguir "no existe" de
        cualquier otro fallo, por código de salida y no por texto. Un padre sin
        permiso de búsqueda también hace fallar `test -e`, así que antes de
        devolver NotFound se comprueba el directorio padre.
        """
        result = self._run(read_command(path))
        if result.succeeded:
            return Found(result.text)

        cause = result.cause or CommandExecutionError(result.command, result.text, result.exit_status)
        if result.exit_status is None:
            # Sin código de salida: falló el transporte, no el comando
            return TransportFailure(cause)

        exists = self._run(exists_command(path))
        if exists.exit_status != _TEST_FALSE:
            return TransportFailure(cause)

        parent = self._run(parent_searchable_command(path))
        if parent.succeeded:
            return NotFound(path)
        return TransportFailure(cause)

    def remove_file(self, path: str) -> None:
        """Borra path (rm -f: que no exista no es error)."""
        self._run(remove_command(path)).check()
