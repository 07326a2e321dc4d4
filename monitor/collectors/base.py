from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from monitor.models.metrics import MetricsSnapshot

logger = logging.getLogger(__name__)


class BaseCollector(ABC):
    """Abstract base for metrics collectors.

    Subclasses implement ``collect()`` which returns one snapshot.
    ``poll()`` wraps it with timing and error logging.
    """

    name: str = "base"

    # ── abstract method ─────────────────────────────────

    @abstractmethod
    async def collect(self) -> MetricsSnapshot:
        """Gather metrics and return a snapshot."""
        ...

    # ── public ──────────────────────────────────────────

    async def poll(self) -> MetricsSnapshot:
        started = time.monotonic()
        try:
            snapshot = await self.collect()
        except Exception as exc:
            logger.warning("Collector [%s] failed: %s", self.name, exc)
            raise
        logger.debug(
            "Collector [%s] finished in %.2fs", self.name, time.monotonic() - started
        )
        return snapshot
