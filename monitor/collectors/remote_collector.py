from __future__ import annotations

from monitor.collectors.base import BaseCollector
from monitor.config import Settings
from monitor.models.connection import ConnectionRequest
from monitor.models.metrics import MetricsSnapshot
from monitor.probes.commands import DEFAULT_PROCESS_LIMIT
from monitor.probes.executor import run_probes
from monitor.ssh.auth import DEFAULT_CONNECT_TIMEOUT, Connector, open_session


class RemoteCollector(BaseCollector):
    """Collects a snapshot from one remote host over SSH.

    One instance serves one poll: it opens a session, runs the probes and
    tears everything down before ``collect()`` returns.
    """

    name = "remote_collector"

    def __init__(
        self,
        request: ConnectionRequest,
        key_dir: str,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        probe_timeout: float | None = None,
        process_limit: int = DEFAULT_PROCESS_LIMIT,
        known_hosts: str | None = None,
        connector: Connector | None = None,
    ) -> None:
        self.request = request
        self.key_dir = key_dir
        self.connect_timeout = connect_timeout
        self.probe_timeout = probe_timeout
        self.process_limit = process_limit
        self.known_hosts = known_hosts
        self._connector = connector

    @classmethod
    def from_settings(
        cls,
        request: ConnectionRequest,
        settings: Settings,
        connector: Connector | None = None,
    ) -> RemoteCollector:
        return cls(
            request,
            key_dir=settings.ssh_key_dir,
            connect_timeout=settings.ssh_connect_timeout,
            probe_timeout=settings.probe_timeout,
            process_limit=settings.top_process_limit,
            known_hosts=settings.known_hosts,
            connector=connector,
        )

    async def collect(self) -> MetricsSnapshot:
        async with open_session(
            self.request,
            key_dir=self.key_dir,
            connect_timeout=self.connect_timeout,
            known_hosts=self.known_hosts,
            connector=self._connector,
        ) as session:
            return await run_probes(
                session,
                self.request.host,
                timeout=self.probe_timeout,
                process_limit=self.process_limit,
            )
