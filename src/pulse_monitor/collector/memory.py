"""Memory resource collector."""

from __future__ import annotations

import logging
from typing import Any, Callable

import psutil

from .base import MB, BaseCollector, MemoryInfo, round_half_up, usage_percent

logger = logging.getLogger(__name__)


class MemoryCollector(BaseCollector[MemoryInfo]):
    """Collects physical memory usage.

    Free memory is what psutil reports as ``available``. Total and free are
    each rounded to whole megabytes before ``used`` is derived from them.
    """

    def __init__(self, reader: Callable[[], Any] = psutil.virtual_memory) -> None:
        self._read = reader

    @property
    def name(self) -> str:
        return "memory"

    def collect(self) -> MemoryInfo:
        mem = self._read()
        total_mb = round_half_up(mem.total / MB)
        free_mb = round_half_up(mem.available / MB)
        used_mb = total_mb - free_mb
        info = MemoryInfo(
            used_mb=used_mb,
            total_mb=total_mb,
            usage_percent=usage_percent(used_mb, total_mb),
        )
        logger.debug("memory used=%dMB total=%dMB", used_mb, total_mb)
        return info
