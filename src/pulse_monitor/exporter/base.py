"""Base interface for snapshot exporters."""

from __future__ import annotations

import abc

from ..collector.manager import MetricsSnapshot


class BaseExporter(abc.ABC):
    """A scheduler sink that forwards snapshots somewhere outside the process.

    Instances are callable, so they can be passed straight to
    :meth:`CollectionScheduler.add_sink`.
    """

    @abc.abstractmethod
    def export(self, snapshot: MetricsSnapshot) -> None:
        """Forward one collection cycle."""

    def shutdown(self) -> None:
        """Flush and release resources. Nothing to do by default."""

    def __call__(self, snapshot: MetricsSnapshot) -> None:
        self.export(snapshot)
