from .connection import Auth, ConnectionRequest, KeyAuth, PasswordAuth
from .metrics import (
    CpuMetrics,
    DiskMetrics,
    MemoryMetrics,
    MetricsSnapshot,
    NetworkMetrics,
    ProcessRow,
    ProcessSummary,
    SnapshotSource,
    SystemInfo,
)

__all__ = [
    "Auth",
    "ConnectionRequest",
    "KeyAuth",
    "PasswordAuth",
    "CpuMetrics",
    "DiskMetrics",
    "MemoryMetrics",
    "MetricsSnapshot",
    "NetworkMetrics",
    "ProcessRow",
    "ProcessSummary",
    "SnapshotSource",
    "SystemInfo",
]
