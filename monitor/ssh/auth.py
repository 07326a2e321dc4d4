"""Connection authenticator for remote polls.

Validation happens in :func:`build_connection_request` before any network
I/O. :func:`open_session` then owns the two per-request resources, the
transient key file and the SSH session, and releases both on every exit
path.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from contextlib import ExitStack, asynccontextmanager
from typing import Any

import asyncssh

from monitor.errors import (
    MalformedRequestBody,
    MissingCredential,
    MissingField,
    classify_connect_error,
)
from monitor.models.connection import ConnectionRequest, KeyAuth, PasswordAuth
from monitor.ssh.keys import (
    TransientKeyFile,
    ensure_supported_key_format,
    normalize_private_key,
)
from monitor.ssh.session import SSHSession

logger = logging.getLogger(__name__)

DEFAULT_PORT = 22
DEFAULT_CONNECT_TIMEOUT = 15.0

Connector = Callable[..., Awaitable[Any]]


def _text(payload: Mapping[str, Any], name: str) -> str | None:
    value = payload.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedRequestBody(f"Field '{name}' must be a string")
    return value


def _port(payload: Mapping[str, Any]) -> int:
    value = payload.get("port")
    if value in (None, "", 0):
        return DEFAULT_PORT
    if isinstance(value, bool):
        raise MalformedRequestBody("Field 'port' must be an integer")
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise MalformedRequestBody("Field 'port' must be an integer") from None
    if not 0 < port < 65536:
        raise MalformedRequestBody("Field 'port' must be between 1 and 65535")
    return port


def build_connection_request(payload: Mapping[str, Any]) -> ConnectionRequest:
    """Validate a flat JSON body into a :class:`ConnectionRequest`.

    Expects ``host``, ``username``, optional ``port`` and exactly one of
    ``password`` or ``privateKey`` (with optional ``passphrase``).
    """
    host = _text(payload, "host")
    username = _text(payload, "username")
    if not host or not username:
        raise MissingField()

    password = _text(payload, "password")
    private_key = _text(payload, "privateKey")
    if bool(password) == bool(private_key):
        if password:
            raise MissingCredential("Provide either a private key or a password, not both")
        raise MissingCredential()

    if private_key:
        key = normalize_private_key(private_key)
        if not key:
            raise MissingCredential()
        ensure_supported_key_format(key)
        auth: PasswordAuth | KeyAuth = KeyAuth(
            private_key=key, passphrase=_text(payload, "passphrase")
        )
    else:
        auth = PasswordAuth(password=password)

    return ConnectionRequest(host=host, port=_port(payload), username=username, auth=auth)


def _connect_options(
    request: ConnectionRequest,
    connect_timeout: float,
    known_hosts: str | None,
) -> dict[str, Any]:
    return {
        "host": request.host,
        "port": request.port,
        "username": request.username,
        "connect_timeout": connect_timeout,
        "known_hosts": known_hosts,
        "agent_path": None,
    }


@asynccontextmanager
async def open_session(
    request: ConnectionRequest,
    *,
    key_dir: str,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    known_hosts: str | None = None,
    connector: Connector | None = None,
) -> AsyncIterator[SSHSession]:
    """Authenticate against ``request.host`` and yield an open session.

    Connect failures are re-raised as classified ``MonitorError`` subclasses.
    The session is closed and any key file deleted when the block exits.
    """
    connect = connector or asyncssh.connect
    options = _connect_options(request, connect_timeout, known_hosts)

    with ExitStack() as stack:
        if isinstance(request.auth, KeyAuth):
            key = normalize_private_key(request.auth.private_key)
            ensure_supported_key_format(key)
            key_path = stack.enter_context(TransientKeyFile(key_dir, key))
            options["client_keys"] = [str(key_path)]
            if request.auth.passphrase:
                options["passphrase"] = request.auth.passphrase
        else:
            options["password"] = request.auth.password
            options["client_keys"] = None
            options["kbdint_auth"] = True

        logger.info(
            "Attempting SSH connection to %s:%d as %s (%s auth)",
            request.host, request.port, request.username, request.auth.kind,
        )
        try:
            conn = await connect(**options)
        except Exception as exc:
            error = classify_connect_error(exc)
            logger.warning("SSH connection to %s failed: %s", request.host, exc)
            raise error from exc

        session = SSHSession(conn)
        try:
            yield session
        finally:
            await session.close()
