"""Tests for the periodic collection scheduler."""

import threading

import pytest

from pulse_monitor.collector.base import CpuInfo, DiskInfo, MemoryInfo
from pulse_monitor.collector.manager import MetricsSnapshot
from pulse_monitor.config import CollectorConfig
from pulse_monitor.history import Averages
from pulse_monitor.scheduler import MIN_INTERVAL_SECONDS, CollectionScheduler


class CountingCollector:
    """Stand-in for MetricsCollector that counts cycles."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self.called = threading.Event()

    def collect_all(self) -> MetricsSnapshot:
        self.calls += 1
        self.called.set()
        if self.fail:
            raise RuntimeError("boom")
        return MetricsSnapshot(
            cpu=CpuInfo(usage_percent=self.calls, speed_mhz=0.0),
            memory=MemoryInfo(used_mb=0, total_mb=0, usage_percent=0),
            disk=DiskInfo.empty(),
            averages=Averages(),
        )


class TestCollectionScheduler:
    """Tests for CollectionScheduler."""

    def test_defaults(self):
        scheduler = CollectionScheduler(CountingCollector())
        assert scheduler.interval == 5.0
        assert scheduler.focused is True
        assert not scheduler.is_running

    def test_interval_minimum(self):
        scheduler = CollectionScheduler(CountingCollector(), CollectorConfig(interval_seconds=0.001))
        assert scheduler.interval == MIN_INTERVAL_SECONDS

    def test_run_once_feeds_sinks(self):
        scheduler = CollectionScheduler(CountingCollector())
        received = []
        scheduler.add_sink(received.append)
        snapshot = scheduler.run_once()
        assert received == [snapshot]

    def test_sink_failure_is_isolated(self, caplog):
        scheduler = CollectionScheduler(CountingCollector())
        received = []

        def bad_sink(_snapshot):
            raise ValueError("sink broke")

        scheduler.add_sink(bad_sink)
        scheduler.add_sink(received.append)
        scheduler.run_once()
        assert len(received) == 1
        assert "Sink failed" in caplog.text

    def test_collection_failure_is_logged(self, caplog):
        scheduler = CollectionScheduler(CountingCollector(fail=True))
        assert scheduler.run_once() is None
        assert "Collection cycle failed" in caplog.text

    def test_start_stop(self):
        collector = CountingCollector()
        scheduler = CollectionScheduler(collector, CollectorConfig(interval_seconds=0.1))
        scheduler.start()
        try:
            assert scheduler.is_running
            assert collector.called.wait(2.0)
        finally:
            scheduler.stop()
        assert not scheduler.is_running

    def test_start_idempotent(self):
        scheduler = CollectionScheduler(CountingCollector(), CollectorConfig(interval_seconds=0.1))
        scheduler.start()
        try:
            thread1 = scheduler._thread
            scheduler.start()
            assert scheduler._thread is thread1
        finally:
            scheduler.stop()

    def test_daemon_thread(self):
        scheduler = CollectionScheduler(CountingCollector(), CollectorConfig(interval_seconds=0.1))
        scheduler.start()
        try:
            assert scheduler._thread.daemon is True
            assert scheduler._thread.name == "CollectionScheduler"
        finally:
            scheduler.stop()

    def test_set_interval_when_stopped_does_not_start(self):
        scheduler = CollectionScheduler(CountingCollector())
        scheduler.set_interval(1.0)
        assert scheduler.interval == 1.0
        assert not scheduler.is_running

    def test_reschedule_replaces_pending_schedule(self):
        collector = CountingCollector()
        scheduler = CollectionScheduler(collector, CollectorConfig(interval_seconds=60.0))
        scheduler.start()
        try:
            assert collector.called.wait(2.0)
            old_thread = scheduler._thread

            collector.called.clear()
            scheduler.set_interval(0.1)

            assert not old_thread.is_alive()
            assert scheduler._thread is not old_thread
            assert scheduler.is_running
            # the new cadence fires well before the old 60s wait would have
            assert collector.called.wait(2.0)
            alive = [t for t in threading.enumerate() if t.name == "CollectionScheduler"]
            assert len(alive) == 1
        finally:
            scheduler.stop()

    def test_focus_switches_cadence(self):
        config = CollectorConfig(interval_seconds=1.0, unfocused_interval_seconds=10.0)
        scheduler = CollectionScheduler(CountingCollector(), config)
        scheduler.set_focused(False)
        assert scheduler.interval == 10.0
        assert scheduler.focused is False
        scheduler.set_focused(True)
        assert scheduler.interval == 1.0

    def test_non_finite_interval_rejected(self):
        scheduler = CollectionScheduler(CountingCollector(), CollectorConfig(interval_seconds=0.1))
        scheduler.start()
        try:
            with pytest.raises(ValueError):
                scheduler.set_interval(float("inf"))
            assert scheduler.interval == 0.1
            assert scheduler.is_running
        finally:
            scheduler.stop()

    def test_non_finite_unfocused_interval_keeps_focus(self):
        config = CollectorConfig(interval_seconds=1.0, unfocused_interval_seconds=float("nan"))
        scheduler = CollectionScheduler(CountingCollector(), config)
        with pytest.raises(ValueError):
            scheduler.set_focused(False)
        assert scheduler.focused is True
        assert scheduler.interval == 1.0
