"""Disk resource collector."""

from __future__ import annotations

import logging
from typing import Any, Callable

import psutil

from ..platforms import DEFAULT_DISK_LABEL, DiskTarget, resolve_disk_target
from .base import GB, BaseCollector, DiskInfo, round_half_up, usage_percent

logger = logging.getLogger(__name__)


class DiskCollector(BaseCollector[DiskInfo]):
    """Collects usage of the platform's monitored filesystem.

    Disk monitoring is best-effort: an unresolvable path, an unsupported
    platform or a failing stat call yields :meth:`DiskInfo.empty` and a
    logged warning. The target used by the latest call is kept in
    :attr:`last_target` so its label always matches the sampled path.
    """

    def __init__(
        self,
        usage_reader: Callable[[str], Any] = psutil.disk_usage,
        target_resolver: Callable[[], DiskTarget] = resolve_disk_target,
    ) -> None:
        self._read_usage = usage_reader
        self._resolve = target_resolver
        self.last_target = DiskTarget(None, DEFAULT_DISK_LABEL)

    @property
    def name(self) -> str:
        return "disk"

    def resolve_target(self) -> DiskTarget:
        """Resolve the monitored path; disabled target when resolution fails."""
        try:
            target = self._resolve()
        except Exception as exc:
            logger.warning("Cannot resolve monitored disk path: %s", exc)
            target = DiskTarget(None, DEFAULT_DISK_LABEL)
        self.last_target = target
        return target

    def collect(self) -> DiskInfo:
        target = self.resolve_target()
        if target.path is None:
            logger.debug("Disk monitoring unavailable (%s)", target.label)
            return DiskInfo.empty()

        try:
            usage = self._read_usage(target.path)
        except Exception as exc:
            logger.warning("Failed to get disk stats for %s: %s", target.path, exc)
            return DiskInfo.empty()

        # psutil's ``free`` excludes root-reserved blocks on POSIX; ``used``
        # counts every non-free block, so total - used is blocks * f_bfree.
        total_gb = round_half_up(usage.total / GB)
        free_gb = round_half_up((usage.total - usage.used) / GB)
        return DiskInfo(
            free_gb=free_gb,
            total_gb=total_gb,
            usage_percent=usage_percent(total_gb - free_gb, total_gb),
        )
