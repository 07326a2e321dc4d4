from __future__ import annotations

import logging

import pytest

from monitor.collectors.base import BaseCollector
from monitor.models.metrics import MetricsSnapshot, SnapshotSource


class StubCollector(BaseCollector):
    """Collector that returns an empty snapshot and counts calls."""

    name = "stub"

    def __init__(self) -> None:
        self.collect_count = 0

    async def collect(self) -> MetricsSnapshot:
        self.collect_count += 1
        return MetricsSnapshot(source=SnapshotSource.LOCAL)


class ErrorCollector(BaseCollector):
    """Collector that raises on every collect call."""

    name = "error"

    async def collect(self) -> MetricsSnapshot:
        raise RuntimeError("collect failed")


@pytest.mark.asyncio
async def test_poll_returns_snapshot():
    collector = StubCollector()
    snap = await collector.poll()
    assert snap.source == SnapshotSource.LOCAL
    assert collector.collect_count == 1


@pytest.mark.asyncio
async def test_each_poll_is_fresh():
    collector = StubCollector()
    first = await collector.poll()
    second = await collector.poll()
    assert first is not second
    assert collector.collect_count == 2


@pytest.mark.asyncio
async def test_poll_propagates_and_logs_errors(caplog):
    with caplog.at_level(logging.WARNING, logger="monitor.collectors.base"):
        with pytest.raises(RuntimeError, match="collect failed"):
            await ErrorCollector().poll()
    assert "Collector [error] failed" in caplog.text


def test_base_is_abstract():
    with pytest.raises(TypeError):
        BaseCollector()
