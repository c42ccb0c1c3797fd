"""Base interface and value types for system resource collectors."""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

MB = 1024 * 1024
GB = 1024 * 1024 * 1024

T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def usage_percent(used: float, total: float) -> int:
    """Integer usage percentage clamped to 0..100; 0 when *total* is not positive."""
    if total <= 0:
        return 0
    return min(100, max(0, round_half_up(used / total * 100)))


@dataclass(slots=True, frozen=True)
class CpuInfo:
    """CPU utilization derived from one sampling call."""

    usage_percent: int
    speed_mhz: float


@dataclass(slots=True, frozen=True)
class MemoryInfo:
    """Physical memory utilization in megabytes."""

    used_mb: int
    total_mb: int
    usage_percent: int


@dataclass(slots=True, frozen=True)
class DiskInfo:
    """Filesystem utilization of the monitored path in gigabytes."""

    free_gb: int
    total_gb: int
    usage_percent: int

    @property
    def used_gb(self) -> int:
        return self.total_gb - self.free_gb

    @classmethod
    def empty(cls) -> DiskInfo:
        return cls(free_gb=0, total_gb=0, usage_percent=0)


@dataclass
class MetricSample:
    """A single gauge data point handed to exporters."""

    name: str
    value: float
    unit: str
    timestamp: float
    labels: dict[str, str] = field(default_factory=dict)
    description: str = ""


class BaseCollector(abc.ABC, Generic[T]):
    """Abstract base class for system resource collectors."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in configuration and log output."""

    @abc.abstractmethod
    def collect(self) -> T:
        """Sample the resource once and return its usage figures."""

