"""Periodic driver that runs collection cycles and feeds sinks."""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable

from .collector.manager import MetricsCollector, MetricsSnapshot
from .config import CollectorConfig

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 0.1


class CollectionScheduler:
    """Runs :meth:`MetricsCollector.collect_all` on an interval.

    One worker thread runs at a time. Changing the cadence while running
    stops the current worker (cancelling its pending wait) before starting a
    new one, so there is never more than one active schedule.
    """

    def __init__(self, collector: MetricsCollector, config: CollectorConfig | None = None) -> None:
        self._collector = collector
        self._config = config or CollectorConfig()
        self._sinks: list[Callable[[MetricsSnapshot], None]] = []
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._focused = True
        self._interval = self._clamp(self._config.interval_seconds)

    @staticmethod
    def _clamp(seconds: float) -> float:
        if not math.isfinite(seconds):
            raise ValueError(f"interval must be finite, got {seconds}")
        return max(MIN_INTERVAL_SECONDS, seconds)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def focused(self) -> bool:
        return self._focused

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def add_sink(self, sink: Callable[[MetricsSnapshot], None]) -> None:
        """Register a callback to receive each snapshot."""
        self._sinks.append(sink)

    def run_once(self) -> MetricsSnapshot | None:
        """Run one collection cycle and deliver it to every sink."""
        try:
            snapshot = self._collector.collect_all()
        except Exception:
            logger.exception("Collection cycle failed")
            return None
        for sink in self._sinks:
            try:
                sink(snapshot)
            except Exception:
                logger.exception("Sink failed")
        return snapshot

    def _run(self, stop_event: threading.Event, interval: float) -> None:
        """Background thread loop."""
        while not stop_event.is_set():
            self.run_once()
            stop_event.wait(interval)

    def start(self) -> None:
        """Start collecting in the background."""
        with self._lock:
            self._start_locked()

    def _start_locked(self) -> None:
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event, self._interval),
            daemon=True,
            name="CollectionScheduler",
        )
        self._thread.start()
        logger.info("CollectionScheduler started (interval=%.1fs)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop background collection."""
        with self._lock:
            self._stop_locked(timeout)

    def _stop_locked(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            self._thread = None
            logger.info("CollectionScheduler stopped")

    def set_interval(self, seconds: float) -> None:
        """Change the cadence, restarting the schedule if it is running."""
        interval = self._clamp(seconds)
        with self._lock:
            if interval == self._interval:
                return
            self._interval = interval
            if self._thread is not None:
                self._stop_locked(timeout=None)
                self._start_locked()
                logger.info("CollectionScheduler rescheduled (interval=%.1fs)", interval)

    def set_focused(self, focused: bool) -> None:
        """Switch between the focused and unfocused cadence."""
        if focused:
            self.set_interval(self._config.interval_seconds)
        else:
            self.set_interval(self._config.unfocused_interval_seconds)
        self._focused = focused
