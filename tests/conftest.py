"""
Canales de prueba para el controller

- FakeChannel: interpreta los comandos del protocolo sobre un dict (path -> contenido)
  usando shlex, igual que lo haría un shell POSIX con las comillas.
- ShellChannel: ejecuta los comandos con /bin/sh real contra un directorio temporal.
"""

import shlex
import subprocess
from typing import Dict, List, Optional

import pytest

from nginxconf.core.errors import CommandExecutionError
from nginxconf.transport.contracts import CommandResult


class FakeChannel:
    """Sistema de archivos remoto en memoria"""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = dict(files or {})
        self.commands: List[str] = []
        # Prefijos de comando que deben fallar (p. ej. "sudo mv")
        self.fail_on: List[str] = []
        # Directorios sin permiso de búsqueda: test -e falla dentro de ellos
        self.unsearchable: List[str] = []
        self.closed = False

    def _result(self, command: str, output: str = "", status: int = 0) -> CommandResult:
        if status == 0:
            return CommandResult(
                command=command, output=output.encode("utf-8", errors="surrogateescape"), succeeded=True, exit_status=0
            )
        cause = CommandExecutionError(command, output, status)
        return CommandResult(
            command=command,
            output=output.encode("utf-8", errors="surrogateescape"),
            succeeded=False,
            cause=cause,
            exit_status=status,
        )

    def _hidden(self, path: str) -> bool:
        return any(path.startswith(d.rstrip("/") + "/") for d in self.unsearchable)

    def run(self, command: str, timeout: Optional[float] = None) -> CommandResult:
        self.commands.append(command)
        if any(command.startswith(prefix) for prefix in self.fail_on):
            return self._result(command, "permission denied", 1)

        words = shlex.split(command)
        if ">" in words:
            # La última ">" es la redirección; el contenido citado puede ser ">" literal
            redirect = len(words) - 1 - words[::-1].index(">")
            argv, target = words[:redirect], words[redirect + 1]
        else:
            argv, target = words, None

        if argv[0] == "sudo":
            argv = argv[1:]

        name = argv[0]
        if name == "printf" and target is not None:
            self.files[target] = argv[2] if len(argv) > 2 else ""
            return self._result(command)
        if name == "mv":
            src, dst = argv[1], argv[2]
            if src not in self.files:
                return self._result(command, f"mv: cannot stat '{src}': No such file or directory", 1)
            self.files[dst] = self.files.pop(src)
            return self._result(command)
        if name == "cat":
            path = argv[1]
            if self._hidden(path):
                return self._result(command, f"cat: {path}: Permission denied", 1)
            if path not in self.files:
                return self._result(command, f"cat: {path}: No such file or directory", 1)
            return self._result(command, self.files[path])
        if name == "test" and argv[1] == "-e":
            path = argv[2]
            return self._result(command, "", 0 if path in self.files and not self._hidden(path) else 1)
        if name == "test" and argv[1] == "-x":
            return self._result(command, "", 1 if argv[2] in self.unsearchable else 0)
        if name == "rm":
            self.files.pop(argv[-1], None)
            return self._result(command)
        return self._result(command, f"sh: {name}: not found", 127)

    def close(self) -> None:
        self.closed = True


class ShellChannel:
    """Ejecuta cada comando en un /bin/sh local (sin estado compartido)"""

    def __init__(self):
        self.commands: List[str] = []

    def run(self, command: str, timeout: Optional[float] = None) -> CommandResult:
        self.commands.append(command)
        proc = subprocess.run(
            ["sh", "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout or 10,
            check=False,
        )
        if proc.returncode == 0:
            return CommandResult(command=command, output=proc.stdout, succeeded=True, exit_status=0)
        cause = CommandExecutionError(command, proc.stdout.decode(errors="replace"), proc.returncode)
        return CommandResult(
            command=command, output=proc.stdout, succeeded=False, cause=cause, exit_status=proc.returncode
        )


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def shell():
    return ShellChannel()
