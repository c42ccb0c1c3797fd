"""Rolling window of recent samples and its moving averages."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass

from .collector.base import round_half_up

DEFAULT_HISTORY_SIZE = 24


@dataclass(slots=True, frozen=True)
class Sample:
    """One collection cycle's instantaneous percentages."""

    timestamp: float
    cpu_usage: int
    memory_usage: int
    disk_usage: int


@dataclass(slots=True, frozen=True)
class Averages:
    """Mean of each metric over the current window, rounded to integers."""

    cpu_avg: int = 0
    memory_avg: int = 0
    disk_avg: int = 0


class MetricsHistory:
    """Fixed-capacity FIFO of :class:`Sample` rows.

    Eviction is by count: once *capacity* samples are held, each push drops
    the oldest one. The wall-clock span covered therefore grows when the
    sampling interval is widened.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be positive, got {capacity}")
        self._samples: deque[Sample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def __len__(self) -> int:
        return len(self._samples)

    def push(
        self,
        cpu_usage: int,
        memory_usage: int,
        disk_usage: int,
        timestamp: float | None = None,
    ) -> Sample:
        """Append a timestamped sample, evicting the oldest when full."""
        sample = Sample(
            timestamp=time.time() if timestamp is None else timestamp,
            cpu_usage=cpu_usage,
            memory_usage=memory_usage,
            disk_usage=disk_usage,
        )
        self._samples.append(sample)
        return sample

    def samples(self) -> list[Sample]:
        """Window contents, oldest first."""
        return list(self._samples)

    def averages(self) -> Averages:
        count = len(self._samples)
        if count == 0:
            return Averages()
        return Averages(
            cpu_avg=round_half_up(sum(s.cpu_usage for s in self._samples) / count),
            memory_avg=round_half_up(sum(s.memory_usage for s in self._samples) / count),
            disk_avg=round_half_up(sum(s.disk_usage for s in self._samples) / count),
        )

    def clear(self) -> None:
        self._samples.clear()
