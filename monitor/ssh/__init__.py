from .auth import build_connection_request, open_session
from .keys import TransientKeyFile, normalize_private_key
from .session import CommandResult, SSHSession

__all__ = [
    "build_connection_request",
    "open_session",
    "TransientKeyFile",
    "normalize_private_key",
    "CommandResult",
    "SSHSession",
]
