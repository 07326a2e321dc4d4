from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    exit_status: int = 0


class SSHSession:
    """One authenticated asyncssh connection, owned by a single request."""

    def __init__(self, conn) -> None:
        self._conn = conn
        self._closed = False

    async def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Run ``command`` remotely; raises ``TimeoutError`` past ``timeout``."""
        result = await asyncio.wait_for(self._conn.run(command, check=False), timeout)
        # exit_status is None when the remote shell died on a signal
        exit_status = result.exit_status if result.exit_status is not None else -1
        return CommandResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_status=exit_status,
        )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._conn.close()
        try:
            await self._conn.wait_closed()
        except Exception:
            logger.debug("Error while waiting for SSH connection to close", exc_info=True)

    @property
    def closed(self) -> bool:
        return self._closed
