from nginxconf.core.errors import CommandExecutionError, CommandTimeoutError
from nginxconf.transport.contracts import CommandResult
from nginxconf.transport.files import (
    Found,
    NotFound,
    RemoteFiles,
    TransportFailure,
    move_command,
    parent_searchable_command,
    read_command,
    remove_command,
    write_command,
)

import pytest


def test_command_shapes():
    assert write_command("/tmp/nginx_temp.conf", "a'b") == "printf '%s' 'a'\\''b' > /tmp/nginx_temp.conf"
    assert move_command("/tmp/a", "/etc/nginx/b.conf", privileged=True) == "sudo mv /tmp/a /etc/nginx/b.conf"
    assert move_command("/tmp/a", "/etc/b") == "mv /tmp/a /etc/b"
    assert read_command("/etc/nginx/x.conf") == "cat /etc/nginx/x.conf"
    assert remove_command("/etc/nginx/x.conf") == "rm -f /etc/nginx/x.conf"
    assert parent_searchable_command("/etc/nginx/x.conf") == "test -x /etc/nginx -o ! -d /etc/nginx"
    assert parent_searchable_command("x.conf") == "test -x / -o ! -d /"


def test_paths_are_quoted():
    assert read_command("/etc/nginx/a b.conf") == "cat '/etc/nginx/a b.conf'"
    assert remove_command("/tmp/x; rm -rf /") == "rm -f '/tmp/x; rm -rf /'"


def test_read_found(channel):
    channel.files["/etc/a.conf"] = "hello"
    assert RemoteFiles(channel).read_file("/etc/a.conf") == Found("hello")


def test_read_not_found(channel):
    result = RemoteFiles(channel).read_file("/etc/missing.conf")
    assert result == NotFound("/etc/missing.conf")
    assert channel.commands == [
        "cat /etc/missing.conf",
        "test -e /etc/missing.conf",
        "test -x /etc -o ! -d /etc",
    ]


def test_read_under_unsearchable_directory_is_failure(channel):
    # Sin permiso de búsqueda en el padre, test -e también devuelve 1:
    # el archivo puede existir y no debe tratarse como ausente
    channel.files["/etc/priv/a.conf"] = "x"
    channel.unsearchable = ["/etc/priv"]
    result = RemoteFiles(channel).read_file("/etc/priv/a.conf")
    assert isinstance(result, TransportFailure)
    assert isinstance(result.cause, CommandExecutionError)
    assert channel.commands[-1] == "test -x /etc/priv -o ! -d /etc/priv"


def test_read_missing_under_unsearchable_directory_is_failure(channel):
    channel.unsearchable = ["/etc/priv"]
    assert isinstance(RemoteFiles(channel).read_file("/etc/priv/none.conf"), TransportFailure)


def test_read_failure_on_existing_file(channel):
    channel.files["/etc/a.conf"] = "secret"
    channel.fail_on = ["cat"]
    result = RemoteFiles(channel).read_file("/etc/a.conf")
    assert isinstance(result, TransportFailure)
    assert isinstance(result.cause, CommandExecutionError)


class _TimeoutChannel:
    def __init__(self):
        self.commands = []

    def run(self, command, timeout=None):
        self.commands.append(command)
        cause = CommandTimeoutError(command, timeout or 1.0)
        return CommandResult(command=command, output=b"", succeeded=False, cause=cause)


def test_read_transport_failure_skips_existence_check():
    channel = _TimeoutChannel()
    result = RemoteFiles(channel, timeout=2.0).read_file("/etc/a.conf")
    assert isinstance(result, TransportFailure)
    assert isinstance(result.cause, CommandTimeoutError)
    assert channel.commands == ["cat /etc/a.conf"]


def test_write_failure_raises(channel):
    channel.fail_on = ["printf"]
    with pytest.raises(CommandExecutionError):
        RemoteFiles(channel).write_file("/etc/a.conf", "x")


def test_remove_absent_is_not_error(channel):
    RemoteFiles(channel).remove_file("/etc/none.conf")
    assert channel.commands == ["rm -f /etc/none.conf"]


def test_real_shell_operations(shell, tmp_path):
    files = RemoteFiles(shell)
    staged = str(tmp_path / "staged")
    final = str(tmp_path / "final.conf")
    files.write_file(staged, "a'b\n$c")
    files.move_file(staged, final)
    assert files.read_file(final) == Found("a'b\n$c")
    files.remove_file(final)
    assert files.read_file(final) == NotFound(final)


def test_real_shell_missing_parent_is_absent(shell, tmp_path):
    path = str(tmp_path / "nodir" / "a.conf")
    assert RemoteFiles(shell).read_file(path) == NotFound(path)


def test_real_shell_preserves_non_utf8_bytes(shell, tmp_path):
    path = tmp_path / "latin1.conf"
    path.write_bytes(b"server_name caf\xe9;\n")
    files = RemoteFiles(shell)
    result = files.read_file(str(path))
    assert isinstance(result, Found)
    files.write_file(str(path), result.content)
    assert path.read_bytes() == b"server_name caf\xe9;\n"
