from __future__ import annotations

import asyncio
import platform
import socket
import time
from pathlib import Path

import psutil

from monitor.collectors.base import BaseCollector
from monitor.models.metrics import (
    GB,
    MB,
    CpuMetrics,
    DiskMetrics,
    MemoryMetrics,
    MetricsSnapshot,
    NetworkMetrics,
    ProcessSummary,
    SnapshotSource,
    SystemInfo,
    fixed2,
)

_CPUINFO = Path("/proc/cpuinfo")


def _cpu_model() -> str:
    try:
        for line in _CPUINFO.read_text(errors="replace").splitlines():
            if line.lower().startswith("model name"):
                return line.split(":", 1)[1].strip()
    except OSError:
        pass
    return platform.processor() or "Unknown"


def _distro() -> str:
    try:
        return platform.freedesktop_os_release().get("PRETTY_NAME", "Unknown")
    except OSError:
        return platform.platform()


class LocalCollector(BaseCollector):
    """Snapshot of the machine running the service, via psutil.

    Network throughput is the counter delta since the previous poll, so the
    first poll after startup reports ``0.00``.
    """

    name = "local_collector"

    def __init__(self, disk_path: str = "/") -> None:
        self.disk_path = disk_path
        self._last_net: tuple[float, int, int] | None = None

    async def collect(self) -> MetricsSnapshot:
        return await asyncio.to_thread(self._sample)

    def _sample(self) -> MetricsSnapshot:
        cpu_percent = psutil.cpu_percent(interval=None)
        freq = psutil.cpu_freq()
        mem = psutil.virtual_memory()
        disk = psutil.disk_usage(self.disk_path)
        download, upload = self._network_rates(time.monotonic())

        return MetricsSnapshot(
            source=SnapshotSource.LOCAL,
            cpu=CpuMetrics(
                usage_percent=fixed2(cpu_percent),
                cores=psutil.cpu_count(logical=True) or 0,
                model=_cpu_model(),
                speed_ghz=fixed2(freq.current / 1000 if freq else 0),
            ),
            memory=MemoryMetrics(
                total_gb=fixed2(mem.total / GB),
                used_gb=fixed2(mem.used / GB),
                free_gb=fixed2(mem.free / GB),
                usage_percent=fixed2(mem.used / mem.total * 100 if mem.total else 0),
            ),
            disk=DiskMetrics(
                total_gb=fixed2(disk.total / GB),
                used_gb=fixed2(disk.used / GB),
                available_gb=fixed2(disk.free / GB),
                usage_percent=fixed2(disk.percent),
            ),
            network=NetworkMetrics(
                download_mbs=fixed2(download),
                upload_mbs=fixed2(upload),
            ),
            system=SystemInfo(
                platform=platform.system(),
                distro=_distro(),
                arch=platform.machine(),
                hostname=socket.gethostname(),
                uptime_seconds=int(time.time() - psutil.boot_time()),
            ),
            processes=self._process_counts(),
        )

    def _network_rates(self, now: float) -> tuple[float, float]:
        """MB/s received and sent since the last call."""
        counters = psutil.net_io_counters()
        previous = self._last_net
        self._last_net = (now, counters.bytes_recv, counters.bytes_sent)
        if previous is None:
            return 0.0, 0.0

        elapsed = now - previous[0]
        if elapsed <= 0:
            return 0.0, 0.0
        download = max(counters.bytes_recv - previous[1], 0) / elapsed / MB
        upload = max(counters.bytes_sent - previous[2], 0) / elapsed / MB
        return download, upload

    def _process_counts(self) -> ProcessSummary:
        total = running = blocked = 0
        for proc in psutil.process_iter(["status"]):
            try:
                status = proc.info["status"]
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            total += 1
            if status == psutil.STATUS_RUNNING:
                running += 1
            elif status == psutil.STATUS_DISK_SLEEP:
                blocked += 1
        return ProcessSummary(all=total, running=running, blocked=blocked)
