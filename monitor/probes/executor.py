from __future__ import annotations

import logging

import asyncssh

from monitor.errors import ProbeExecutionFailed
from monitor.models.metrics import MetricsSnapshot, ProcessRow
from monitor.probes.commands import (
    DEFAULT_PROCESS_LIMIT,
    build_process_command,
    build_scalar_command,
)
from monitor.probes.parser import (
    build_remote_snapshot,
    parse_process_table,
    parse_scalar_output,
)
from monitor.ssh.session import SSHSession

logger = logging.getLogger(__name__)


async def run_probes(
    session: SSHSession,
    host: str,
    timeout: float | None = None,
    process_limit: int = DEFAULT_PROCESS_LIMIT,
) -> MetricsSnapshot:
    """Run the scalar and process probes on ``session`` and parse the result.

    The scalar probe must exit 0 or the whole poll fails. The process probe
    is best-effort: any failure yields an empty process list.
    """
    try:
        result = await session.run(build_scalar_command(), timeout=timeout)
    except TimeoutError:
        logger.warning("Scalar probe on %s timed out after %ss", host, timeout)
        raise ProbeExecutionFailed("Timed out executing system commands") from None
    except (asyncssh.Error, OSError) as exc:
        raise ProbeExecutionFailed(f"Failed to execute system commands: {exc}") from exc

    if result.exit_status != 0:
        logger.warning(
            "Scalar probe on %s exited with status %d: %s",
            host, result.exit_status, result.stderr.strip(),
        )
        raise ProbeExecutionFailed()

    fields = parse_scalar_output(result.stdout)
    processes = await _top_processes(session, host, timeout, process_limit)
    return build_remote_snapshot(fields, processes, host)


async def _top_processes(
    session: SSHSession,
    host: str,
    timeout: float | None,
    limit: int,
) -> list[ProcessRow]:
    # Exit status is not checked
    try:
        result = await session.run(build_process_command(limit), timeout=timeout)
    except (TimeoutError, asyncssh.Error, OSError):
        logger.warning("Process probe on %s failed; reporting no processes", host, exc_info=True)
        return []
    return parse_process_table(result.stdout, limit)
