"""OpenTelemetry exporter: snapshot percentages as OTLP/HTTP gauges."""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from ..collector.base import MetricSample
from ..collector.manager import MetricsSnapshot
from ..config import OtelExporterConfig
from .base import BaseExporter

logger = logging.getLogger(__name__)


class _GaugeSpec(NamedTuple):
    name: str
    unit: str
    description: str
    window: str | None
    value: Callable[[MetricsSnapshot], float]
    with_disk_label: bool = False


_GAUGES = (
    _GaugeSpec("system.cpu.usage_percent", "%", "CPU usage percentage", "current",
               lambda s: s.cpu.usage_percent),
    _GaugeSpec("system.cpu.usage_percent", "%", "CPU usage percentage", "average",
               lambda s: s.averages.cpu_avg),
    _GaugeSpec("system.cpu.speed_mhz", "MHz", "Clock speed of the first core", None,
               lambda s: s.cpu.speed_mhz),
    _GaugeSpec("system.memory.usage_percent", "%", "Memory usage percentage", "current",
               lambda s: s.memory.usage_percent),
    _GaugeSpec("system.memory.usage_percent", "%", "Memory usage percentage", "average",
               lambda s: s.averages.memory_avg),
    _GaugeSpec("system.memory.used_mb", "MB", "Memory used in megabytes", None,
               lambda s: s.memory.used_mb),
    _GaugeSpec("system.disk.usage_percent", "%", "Disk usage percentage", "current",
               lambda s: s.disk.usage_percent, with_disk_label=True),
    _GaugeSpec("system.disk.usage_percent", "%", "Disk usage percentage", "average",
               lambda s: s.averages.disk_avg, with_disk_label=True),
    _GaugeSpec("system.disk.free_gb", "GB", "Free disk space in gigabytes", None,
               lambda s: s.disk.free_gb, with_disk_label=True),
)


def snapshot_points(snapshot: MetricsSnapshot) -> list[MetricSample]:
    """Flatten *snapshot* into one gauge point per :data:`_GAUGES` entry.

    Current and averaged percentages share a metric name and are told apart
    by the ``window`` attribute.
    """
    points = []
    for spec in _GAUGES:
        labels: dict[str, str] = {}
        if spec.window:
            labels["window"] = spec.window
        if spec.with_disk_label:
            labels["label"] = snapshot.disk_label
        points.append(MetricSample(
            name=spec.name,
            value=spec.value(snapshot),
            unit=spec.unit,
            timestamp=snapshot.timestamp,
            labels=labels,
            description=spec.description,
        ))
    return points


def _otlp_reader(config: OtelExporterConfig) -> MetricReader:
    kwargs: dict[str, Any] = {"endpoint": f"{config.endpoint.rstrip('/')}/v1/metrics"}
    if config.headers:
        kwargs["headers"] = config.headers
    return PeriodicExportingMetricReader(
        OTLPMetricExporter(**kwargs),
        export_interval_millis=config.export_interval_ms,
    )


class OtelExporter(BaseExporter):
    """Records each snapshot as synchronous gauge values.

    The exporter owns its ``MeterProvider`` rather than installing a global
    one. *reader* defaults to a periodic OTLP/HTTP reader built from
    *config*; tests pass an ``InMemoryMetricReader``.
    """

    def __init__(self, config: OtelExporterConfig, reader: MetricReader | None = None) -> None:
        self._provider = MeterProvider(
            resource=Resource.create({SERVICE_NAME: config.service_name}),
            metric_readers=[reader or _otlp_reader(config)],
        )
        meter = self._provider.get_meter("pulse_monitor")
        self._gauges = {
            spec.name: meter.create_gauge(name=spec.name, unit=spec.unit, description=spec.description)
            for spec in _GAUGES
        }
        logger.info("OtelExporter ready (endpoint=%s, service=%s)", config.endpoint, config.service_name)

    def export(self, snapshot: MetricsSnapshot) -> None:
        for point in snapshot_points(snapshot):
            self._gauges[point.name].set(point.value, attributes=point.labels)

    def shutdown(self) -> None:
        self._provider.shutdown()
        logger.info("OtelExporter shut down")
