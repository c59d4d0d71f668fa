"""
Transporte: canal de comandos remotos y operaciones de archivo estructuradas.
"""

from nginxconf.transport.contracts import CommandChannel, CommandResult
from nginxconf.transport.files import RemoteFiles, ReadResult, Found, NotFound, TransportFailure

__all__ = [
    "CommandChannel",
    "CommandResult",
    "RemoteFiles",
    "ReadResult",
    "Found",
    "NotFound",
    "TransportFailure",
]
