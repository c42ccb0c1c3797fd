"""Snapshot composer that runs every collector once per cycle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from ..config import CollectorConfig
from ..history import Averages, MetricsHistory
from .base import CpuInfo, DiskInfo, MemoryInfo
from .cpu import CpuCollector
from .disk import DiskCollector
from .memory import MemoryCollector

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MetricsSnapshot:
    """Instantaneous readings plus rolling averages from one cycle."""

    cpu: CpuInfo
    memory: MemoryInfo
    disk: DiskInfo
    averages: Averages
    disk_label: str = "Disk Usage"
    timestamp: float = field(default_factory=time.time)


class MetricsCollector:
    """Owns the samplers and the rolling history.

    Construct one per process and call :meth:`collect_all` from a single
    thread: the CPU baseline and the history window are not locked.
    """

    def __init__(
        self,
        config: CollectorConfig | None = None,
        cpu: CpuCollector | None = None,
        memory: MemoryCollector | None = None,
        disk: DiskCollector | None = None,
    ) -> None:
        self._config = config or CollectorConfig()
        self._cpu = cpu or CpuCollector()
        self._memory = memory or MemoryCollector()
        self._disk = disk or DiskCollector()
        self.history = MetricsHistory(self._config.history_size)

    def collect_all(self) -> MetricsSnapshot:
        """Sample CPU, memory and disk, fold them into the history and return both."""
        now = time.time()
        cpu = self._cpu.collect() if self._config.cpu else CpuInfo(usage_percent=0, speed_mhz=0.0)
        memory = (
            self._memory.collect() if self._config.memory
            else MemoryInfo(used_mb=0, total_mb=0, usage_percent=0)
        )
        if self._config.disk:
            disk = self._disk.collect()
            label = self._disk.last_target.label
        else:
            disk = DiskInfo.empty()
            label = self._disk.resolve_target().label

        self.history.push(cpu.usage_percent, memory.usage_percent, disk.usage_percent, timestamp=now)
        averages = self.history.averages()
        logger.debug(
            "cycle cpu=%d%% mem=%d%% disk=%d%% (window=%d)",
            cpu.usage_percent, memory.usage_percent, disk.usage_percent, len(self.history),
        )
        return MetricsSnapshot(
            cpu=cpu,
            memory=memory,
            disk=disk,
            averages=averages,
            disk_label=label,
            timestamp=now,
        )
