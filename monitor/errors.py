"""Error taxonomy surfaced to API clients.

Every error carries a user-actionable message and the HTTP status it maps
to. Input errors are 400-class and raised before any network I/O; anything
from the connect or probe phase is 500-class.
"""

from __future__ import annotations

import asyncio
import errno

import asyncssh

PPK_CONVERSION_HELP = (
    "1. Open PuTTYgen\n"
    "2. Load your .ppk file (Conversions > Import key)\n"
    "3. Go to Conversions > Export OpenSSH key\n"
    "4. Save the file and use it here\n\n"
    "Or use command line: puttygen yourkey.ppk -O private-openssh -o yourkey.pem"
)


class MonitorError(Exception):
    status_code: int = 500
    default_message: str = "Failed to fetch remote system info"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MalformedRequestBody(MonitorError):
    status_code = 400
    default_message = "Invalid request body"


class MissingField(MonitorError):
    status_code = 400
    default_message = "Missing required fields: host, username"


class MissingCredential(MonitorError):
    status_code = 400
    default_message = "Either private key or password is required"


class UnsupportedKeyFormat(MonitorError):
    status_code = 400
    default_message = (
        "PPK format detected. Please convert to OpenSSH format:\n\n" + PPK_CONVERSION_HELP
    )


class AuthenticationFailed(MonitorError):
    default_message = "Authentication failed. Please check your username and private key or password."


class ConnectTimeout(MonitorError):
    default_message = "Connection timeout. Please check the host and port."


class ConnectionRefused(MonitorError):
    default_message = "Connection refused. Please check if SSH is running on the remote host."


class ProbeExecutionFailed(MonitorError):
    default_message = "Failed to execute system commands"


class RemoteCollectionError(MonitorError):
    """Unclassified connect failure; carries the transport's raw message."""


# Substrings emitted by SSH transports for each failure class
_AUTH_MARKERS = ("All configured authentication methods failed", "Permission denied")
_TIMEOUT_MARKERS = ("Timed out", "timed out")
_REFUSED_MARKERS = ("ECONNREFUSED", "Connection refused")
_KEY_MARKERS = ("Unsupported key format", "Cannot parse privateKey", "Invalid private key")


def _unsupported_key_error() -> UnsupportedKeyFormat:
    return UnsupportedKeyFormat(
        "Unsupported private key format. Please convert your PPK file to OpenSSH format:\n\n"
        + PPK_CONVERSION_HELP,
        status_code=500,
    )


def classify_connect_error(exc: BaseException) -> MonitorError:
    """Map a transport exception raised while connecting to a MonitorError."""
    if isinstance(exc, MonitorError):
        return exc
    if isinstance(exc, (asyncssh.PermissionDenied, asyncssh.KeyEncryptionError)):
        return AuthenticationFailed()
    if isinstance(exc, asyncssh.KeyImportError):
        return _unsupported_key_error()
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return ConnectTimeout()
    if isinstance(exc, ConnectionRefusedError) or (
        isinstance(exc, OSError) and exc.errno == errno.ECONNREFUSED
    ):
        return ConnectionRefused()

    message = str(exc)
    if any(m in message for m in _AUTH_MARKERS):
        return AuthenticationFailed()
    if any(m in message for m in _TIMEOUT_MARKERS):
        return ConnectTimeout()
    if any(m in message for m in _REFUSED_MARKERS):
        return ConnectionRefused()
    if any(m in message for m in _KEY_MARKERS):
        return _unsupported_key_error()
    return RemoteCollectionError(message or None)
