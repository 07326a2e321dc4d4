from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

GB = 1024**3
MB = 1024**2
COMMAND_MAX_LENGTH = 50


def fixed2(value: float) -> str:
    """Format a number as a display string with two decimals."""
    return f"{value:.2f}"


class SnapshotSource(StrEnum):
    LOCAL = "local"
    REMOTE = "remote"


class _SnapshotModel(BaseModel):
    # Python names on construction, camelCase aliases on the wire
    model_config = ConfigDict(populate_by_name=True)


class CpuMetrics(_SnapshotModel):
    usage_percent: str = Field("0.00", alias="usagePercent")
    cores: int = 0
    model: str = "Unknown"
    speed_ghz: str = Field("0.00", alias="speedGHz")


class MemoryMetrics(_SnapshotModel):
    total_gb: str = Field("0.00", alias="totalGB")
    used_gb: str = Field("0.00", alias="usedGB")
    free_gb: str = Field("0.00", alias="freeGB")
    usage_percent: str = Field("0.00", alias="usagePercent")


class DiskMetrics(_SnapshotModel):
    total_gb: str = Field("0.00", alias="totalGB")
    used_gb: str = Field("0.00", alias="usedGB")
    available_gb: str = Field("0.00", alias="availableGB")
    usage_percent: str = Field("0.00", alias="usagePercent")


class NetworkMetrics(_SnapshotModel):
    download_mbs: str = Field("0.00", alias="downloadMBs")
    upload_mbs: str = Field("0.00", alias="uploadMBs")


class SystemInfo(_SnapshotModel):
    platform: str = "Linux"
    distro: str = "Unknown"
    arch: str = "Unknown"
    hostname: str = ""
    uptime_seconds: int = Field(0, alias="uptimeSeconds")


class ProcessRow(_SnapshotModel):
    """One row of a ``ps aux`` listing."""

    user: str
    pid: int
    cpu_percent: float = Field(0.0, alias="cpuPercent")
    mem_percent: float = Field(0.0, alias="memPercent")
    virtual_size_kb: int = Field(0, alias="virtualSizeKB")
    resident_size_kb: int = Field(0, alias="residentSizeKB")
    tty: str = "?"
    stat: str = ""
    start: str = ""
    time: str = ""
    command: str = ""

    @field_validator("command")
    @classmethod
    def _truncate_command(cls, value: str) -> str:
        return value[:COMMAND_MAX_LENGTH]

    @computed_field(alias="residentSizeMB")
    @property
    def resident_size_mb(self) -> int:
        # Half-up rounding of KB -> MB
        return int(self.resident_size_kb / 1024 + 0.5)


class ProcessSummary(_SnapshotModel):
    all: int = 0
    running: int = 0
    blocked: int = 0
    top: list[ProcessRow] = Field(default_factory=list)


class MetricsSnapshot(_SnapshotModel):
    """Point-in-time resource metrics for one host, local or remote."""

    source: SnapshotSource
    cpu: CpuMetrics = Field(default_factory=CpuMetrics)
    memory: MemoryMetrics = Field(default_factory=MemoryMetrics)
    disk: DiskMetrics = Field(default_factory=DiskMetrics)
    network: NetworkMetrics = Field(default_factory=NetworkMetrics)
    system: SystemInfo = Field(default_factory=SystemInfo)
    processes: ProcessSummary = Field(default_factory=ProcessSummary)
    collected_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="collectedAt",
    )
