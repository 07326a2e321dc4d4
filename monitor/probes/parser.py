from __future__ import annotations

import math
import re

from monitor.models.metrics import (
    GB,
    CpuMetrics,
    DiskMetrics,
    MemoryMetrics,
    MetricsSnapshot,
    NetworkMetrics,
    ProcessRow,
    ProcessSummary,
    SnapshotSource,
    SystemInfo,
    fixed2,
)
from monitor.probes.commands import DEFAULT_PROCESS_LIMIT, FIELD_ORDER, SENTINEL

# ps aux: USER PID %CPU %MEM VSZ RSS TTY STAT START TIME COMMAND...
PS_COLUMNS = 11

_TAGGED = re.compile(r"^([a-z_]+)=(.*)$", re.DOTALL)
_FLOAT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INT = re.compile(r"^[+-]?\d+")


# ── numeric helpers ─────────────────────────────────

def to_float(raw: str | None, default: float = 0.0) -> float:
    """Parse the leading number of ``raw``, or return ``default``."""
    if raw is None:
        return default
    match = _FLOAT.match(raw.strip())
    if not match:
        return default
    value = float(match.group(0))
    return value if math.isfinite(value) else default


def to_int(raw: str | None, default: int = 0) -> int:
    if raw is None:
        return default
    match = _INT.match(raw.strip())
    return int(match.group(0)) if match else default


def to_divisor(raw: str | None) -> int:
    """Like ``to_int`` but never zero or negative."""
    value = to_int(raw, 1)
    return value if value > 0 else 1


def percent(part: float, whole: float) -> str:
    return fixed2(part / whole * 100)


def to_gb(value: float) -> str:
    return fixed2(value / GB)


# ── scalar probes ───────────────────────────────────

def parse_scalar_output(stdout: str) -> dict[str, str]:
    """Split combined probe stdout into ``{probe key: raw value}``.

    Segments printed as ``key=value`` are read by key. Anything else falls
    back to its position in the probe order.
    """
    segments = [s.strip() for s in stdout.strip().split(SENTINEL)]
    fields: dict[str, str] = {}
    for index, segment in enumerate(segments):
        match = _TAGGED.match(segment)
        if match and match.group(1) in FIELD_ORDER:
            fields[match.group(1)] = match.group(2).strip()
        elif index < len(FIELD_ORDER):
            fields.setdefault(FIELD_ORDER[index], segment)
    return fields


# ── process table ───────────────────────────────────

def parse_process_line(line: str) -> ProcessRow | None:
    parts = line.split()
    if len(parts) < PS_COLUMNS:
        return None
    return ProcessRow(
        user=parts[0],
        pid=to_int(parts[1]),
        cpu_percent=to_float(parts[2]),
        mem_percent=to_float(parts[3]),
        virtual_size_kb=to_int(parts[4]),
        resident_size_kb=to_int(parts[5]),
        tty=parts[6],
        stat=parts[7],
        start=parts[8],
        time=parts[9],
        command=" ".join(parts[10:]),
    )


def parse_process_table(stdout: str, limit: int = DEFAULT_PROCESS_LIMIT) -> list[ProcessRow]:
    """Rows sorted by CPU, highest first; short lines are dropped."""
    rows: list[ProcessRow] = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        row = parse_process_line(line)
        if row is not None:
            rows.append(row)
    rows.sort(key=lambda r: r.cpu_percent, reverse=True)
    return rows[:limit]


# ── snapshot ────────────────────────────────────────

def build_remote_snapshot(
    fields: dict[str, str],
    processes: list[ProcessRow],
    host: str,
) -> MetricsSnapshot:
    mem_total = to_divisor(fields.get("mem_total"))
    mem_used = to_int(fields.get("mem_used"))
    mem_free = to_int(fields.get("mem_free"))
    disk_total = to_divisor(fields.get("disk_total"))
    disk_used = to_int(fields.get("disk_used"))
    disk_available = to_int(fields.get("disk_available"))

    return MetricsSnapshot(
        source=SnapshotSource.REMOTE,
        cpu=CpuMetrics(
            usage_percent=fixed2(to_float(fields.get("cpu_usage"))),
            cores=to_int(fields.get("cpu_cores")),
            model=fields.get("cpu_model") or "Unknown",
            speed_ghz=fixed2(0),
        ),
        memory=MemoryMetrics(
            total_gb=to_gb(mem_total),
            used_gb=to_gb(mem_used),
            free_gb=to_gb(mem_free),
            usage_percent=percent(mem_used, mem_total),
        ),
        disk=DiskMetrics(
            total_gb=to_gb(disk_total),
            used_gb=to_gb(disk_used),
            available_gb=to_gb(disk_available),
            usage_percent=fixed2(to_float(fields.get("disk_use_percent"))),
        ),
        # Not observable through the probe set
        network=NetworkMetrics(download_mbs=fixed2(0), upload_mbs=fixed2(0)),
        system=SystemInfo(
            platform=fields.get("platform") or "Linux",
            distro=fields.get("distro") or "Unknown",
            arch=fields.get("arch") or "Unknown",
            hostname=fields.get("hostname") or host,
            uptime_seconds=math.floor(to_float(fields.get("uptime"))),
        ),
        processes=ProcessSummary(
            all=to_int(fields.get("proc_all")),
            running=to_int(fields.get("proc_running")),
            blocked=0,
            top=processes,
        ),
    )
