"""
Módulo SSH - Sesión remota compartida y ejecución de comandos

Una única conexión paramiko por configuración del provider; cada comando abre
su propio canal sobre ese transporte.
"""

import time
from typing import Optional

import paramiko
from rich.console import Console
from rich.markup import escape

from nginxconf.core.errors import (
    AuthenticationError,
    CommandExecutionError,
    CommandTimeoutError,
    RemoteConnectionError,
)
from nginxconf.core.models import ProviderConfig
from nginxconf.transport.contracts import CommandResult


_RECV_CHUNK = 32768
_POLL_INTERVAL = 0.01


class RemoteSession:
    """
    Contexto de ejecución autenticado y ligado a un host.

    Es dueño exclusivo de la conexión; run() es seguro desde varios hilos
    porque cada llamada usa un canal propio del transporte.
    """

    def __init__(
        self,
        client: paramiko.SSHClient,
        host: str,
        user: str,
        command_timeout: Optional[float] = None,
        console: Optional[Console] = None
    ):
        self._client = client
        self.host = host
        self.user = user
        self.command_timeout = command_timeout
        self.console = console
        self._closed = False

    @property
    def is_active(self) -> bool:
        if self._closed:
            return False
        transport = self._client.get_transport()
        return transport is not None and transport.is_active()

    def run(self, command: str, timeout: Optional[float] = None) -> CommandResult:
        """
        Ejecuta un comando remoto y devuelve su resultado

        Args:
            command: Comando de shell a ejecutar
            timeout: Deadline en segundos (None usa el de la sesión)

        Returns:
            CommandResult con la salida combinada stdout+stderr
        """
        deadline = timeout if timeout is not None else self.command_timeout

        if not self.is_active:
            cause = RemoteConnectionError(self.host, "la sesión SSH no está activa")
            return CommandResult(command=command, output=b"", succeeded=False, cause=cause)

        if self.console:
            self.console.print(f"[dim]  $ {escape(_preview(command))}[/dim]")

        try:
            channel = self._client.get_transport().open_session()
        except (paramiko.SSHException, OSError) as e:
            cause = CommandExecutionError(command, f"no se pudo abrir el canal: {e}")
            return CommandResult(command=command, output=b"", succeeded=False, cause=cause)

        try:
            channel.set_combine_stderr(True)
            channel.exec_command(command.encode("utf-8", errors="surrogateescape"))
            output = _collect_output(channel, command, deadline)
            exit_status = channel.recv_exit_status()
        except CommandTimeoutError as e:
            return CommandResult(command=command, output=b"", succeeded=False, cause=e)
        except (paramiko.SSHException, OSError) as e:
            cause = CommandExecutionError(command, f"el transporte falló: {e}")
            return CommandResult(command=command, output=b"", succeeded=False, cause=cause)
        finally:
            channel.close()

        if exit_status != 0:
            cause = CommandExecutionError(
                command, output.decode("utf-8", errors="replace"), exit_status
            )
            return CommandResult(
                command=command, output=output, succeeded=False, cause=cause, exit_status=exit_status
            )
        return CommandResult(command=command, output=output, succeeded=True, exit_status=0)

    def execute(self, command: str, timeout: Optional[float] = None) -> str:
        """Como run(), pero lanza CommandExecutionError si el comando falla."""
        return self.run(command, timeout=timeout).check()

    def close(self) -> None:
        """Libera la conexión (idempotente)."""
        if self._closed:
            return
        self._closed = True
        self._client.close()
        if self.console:
            self.console.print(f"[dim]Conexión SSH cerrada: {self.user}@{self.host}[/dim]")

    def __enter__(self) -> "RemoteSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def connect(
    host: str,
    user: str,
    password: str,
    port: int = 22,
    timeout: float = 10.0,
    command_timeout: Optional[float] = None,
    console: Optional[Console] = None
) -> RemoteSession:
    """
    Abre la sesión SSH compartida

    Args:
        host: Hostname o IP del servidor
        user: Usuario SSH
        password: Contraseña SSH
        port: Puerto SSH
        timeout: Timeout de conexión en segundos
        command_timeout: Deadline por defecto de cada comando
        console: Console de Rich para salida

    Returns:
        RemoteSession lista para ejecutar comandos
    """
    if console:
        console.print(f"[dim]Inicializando cliente SSH para {user}@{host}:{port}[/dim]")

    client = paramiko.SSHClient()
    # Igual que StrictHostKeyChecking=no: el host key no se verifica
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    try:
        client.connect(
            host,
            port=port,
            username=user,
            password=password,
            timeout=timeout,
            allow_agent=False,
            look_for_keys=False,
        )
    except paramiko.AuthenticationException as e:
        client.close()
        raise AuthenticationError(host, user) from e
    except (paramiko.SSHException, OSError) as e:
        client.close()
        raise RemoteConnectionError(host, str(e) or type(e).__name__) from e

    if console:
        console.print(f"[green]✔ Conexión SSH establecida: {user}@{host}[/green]")
    return RemoteSession(client, host, user, command_timeout=command_timeout, console=console)


def connect_from_config(config: ProviderConfig, console: Optional[Console] = None) -> RemoteSession:
    """Abre la sesión a partir de ProviderConfig."""
    return connect(
        host=config.host,
        user=config.user,
        password=config.password.get_secret_value(),
        port=config.port,
        timeout=config.connect_timeout,
        command_timeout=config.command_timeout,
        console=console,
    )


def _collect_output(channel: paramiko.Channel, command: str, deadline: Optional[float]) -> bytes:
    """Lee la salida hasta que el comando termina; cierra el canal si vence el deadline."""
    chunks = []
    started = time.monotonic()
    while True:
        if channel.recv_ready():
            chunks.append(channel.recv(_RECV_CHUNK))
            continue
        if channel.exit_status_ready():
            while channel.recv_ready():
                chunks.append(channel.recv(_RECV_CHUNK))
            return b"".join(chunks)
        if deadline is not None and time.monotonic() - started >= deadline:
            channel.close()
            partial = b"".join(chunks).decode("utf-8", errors="replace")
            raise CommandTimeoutError(command, deadline, partial)
        time.sleep(_POLL_INTERVAL)


def _preview(command: str, limit: int = 120) -> str:
    first_line = command.splitlines()[0] if command else ""
    if len(first_line) > limit or "\n" in command:
        return first_line[:limit] + " …"
    return first_line
