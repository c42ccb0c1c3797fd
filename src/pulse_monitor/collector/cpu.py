"""CPU resource collector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import psutil

from .base import BaseCollector, CpuInfo, round_half_up

logger = logging.getLogger(__name__)

# Categories summed into the total tick count. Platforms that do not report
# a category (``nice`` on Windows, ``irq`` on macOS) contribute 0.
_TICK_FIELDS = ("user", "nice", "system", "idle", "irq")


@dataclass(slots=True, frozen=True)
class CpuTimes:
    """Cumulative CPU ticks (milliseconds) summed across all logical cores."""

    idle: int
    total: int


def _read_times() -> Sequence[Any]:
    return psutil.cpu_times(percpu=True)


def _read_speed() -> float:
    """Current clock speed of the first core in MHz, 0.0 when unavailable."""
    try:
        per_core = psutil.cpu_freq(percpu=True)
        if per_core:
            return float(per_core[0].current)
        overall = psutil.cpu_freq()
    except (AttributeError, NotImplementedError, OSError):
        return 0.0
    return float(overall.current) if overall else 0.0


def sum_times(per_core: Sequence[Any]) -> CpuTimes:
    """Sum idle and total ticks over *per_core* psutil ``scputimes`` rows."""
    idle = 0.0
    total = 0.0
    for core in per_core:
        idle += core.idle
        total += sum(getattr(core, name, 0.0) for name in _TICK_FIELDS)
    return CpuTimes(idle=round_half_up(idle * 1000), total=round_half_up(total * 1000))


def usage_from_delta(idle_delta: float, total_delta: float) -> int:
    """CPU usage for one interval; 0 when no ticks elapsed."""
    if total_delta <= 0:
        return 0
    usage = 100 - (idle_delta / total_delta) * 100
    return min(100, max(0, round_half_up(usage)))


class CpuCollector(BaseCollector[CpuInfo]):
    """Collects CPU usage by differencing tick counters between calls.

    The first call after construction has no baseline and reports 0%.
    Every call replaces the baseline, so usage always covers the time
    since the previous call.
    """

    def __init__(
        self,
        times_reader: Callable[[], Sequence[Any]] = _read_times,
        speed_reader: Callable[[], float] = _read_speed,
    ) -> None:
        self._read_times = times_reader
        self._read_speed = speed_reader
        self._previous: CpuTimes | None = None

    @property
    def name(self) -> str:
        return "cpu"

    def collect(self) -> CpuInfo:
        current = sum_times(self._read_times())
        speed = self._read_speed()

        previous, self._previous = self._previous, current
        if previous is None:
            return CpuInfo(usage_percent=0, speed_mhz=speed)

        usage = usage_from_delta(current.idle - previous.idle, current.total - previous.total)
        logger.debug("cpu usage=%d%% speed=%.0fMHz", usage, speed)
        return CpuInfo(usage_percent=usage, speed_mhz=speed)
