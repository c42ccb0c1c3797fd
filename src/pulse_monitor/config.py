"""Configuration loading and validation for pulse_monitor."""

from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .history import DEFAULT_HISTORY_SIZE

DEFAULT_CONFIG_NAME = "pulse_monitor.yaml"


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass
class CollectorConfig:
    """Sampling cadence and history settings."""

    interval_seconds: float = 5.0
    unfocused_interval_seconds: float = 15.0
    history_size: int = DEFAULT_HISTORY_SIZE
    cpu: bool = True
    memory: bool = True
    disk: bool = True


@dataclass
class OtelExporterConfig:
    """OpenTelemetry exporter settings."""

    enabled: bool = False
    endpoint: str = "http://localhost:4318"
    service_name: str = "pulse-monitor"
    headers: dict[str, str] = field(default_factory=dict)
    export_interval_ms: int = 10000


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"


@dataclass
class PulseMonitorConfig:
    """Top-level pulse_monitor configuration."""

    collector: CollectorConfig = field(default_factory=CollectorConfig)
    otel: OtelExporterConfig = field(default_factory=OtelExporterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_ENV_MAP: dict[str, tuple[str, ...]] = {
    "PULSE_MONITOR_INTERVAL": ("collector", "interval_seconds"),
    "PULSE_MONITOR_UNFOCUSED_INTERVAL": ("collector", "unfocused_interval_seconds"),
    "PULSE_MONITOR_HISTORY_SIZE": ("collector", "history_size"),
    "PULSE_MONITOR_OTEL_ENABLED": ("otel", "enabled"),
    "PULSE_MONITOR_OTEL_ENDPOINT": ("otel", "endpoint"),
    "PULSE_MONITOR_OTEL_SERVICE_NAME": ("otel", "service_name"),
    "PULSE_MONITOR_LOG_LEVEL": ("logging", "level"),
}

_FLOAT_KEYS = {"interval_seconds", "unfocused_interval_seconds"}
_INT_KEYS = {"history_size", "export_interval_ms"}
_BOOL_KEYS = {"enabled", "cpu", "memory", "disk"}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"not a boolean: {value!r}")


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"invalid value for {key}: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{key} must be a whole number, got {value!r}")
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def _coerce(key: str, value: Any) -> Any:
    """Coerce a raw YAML/env value for *key*, raising :class:`ConfigError`."""
    try:
        if key in _FLOAT_KEYS:
            return float(value)
        if key in _INT_KEYS:
            return _parse_int(key, value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {key}: {value!r}") from exc
    if key in _BOOL_KEYS:
        return _parse_bool(value)
    return value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using the PULSE_MONITOR_ prefix."""
    for env_key, path in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is not None:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            obj[path[-1]] = value
    return data


def _section(cls: type, raw: Any) -> Any:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"section for {cls.__name__} must be a mapping")
    return cls(**{
        k: _coerce(k, v) for k, v in raw.items()
        if k in cls.__dataclass_fields__
    })


def _validate(cfg: PulseMonitorConfig) -> PulseMonitorConfig:
    collector = cfg.collector
    for interval in (collector.interval_seconds, collector.unfocused_interval_seconds):
        if not math.isfinite(interval) or interval <= 0:
            raise ConfigError(f"collector intervals must be positive and finite, got {interval}")
    if collector.history_size < 1:
        raise ConfigError("collector.history_size must be at least 1")
    cfg.logging.level = str(cfg.logging.level).upper()
    return cfg


def _dict_to_config(data: dict[str, Any]) -> PulseMonitorConfig:
    """Convert a raw dictionary to a PulseMonitorConfig dataclass."""
    return _validate(PulseMonitorConfig(
        collector=_section(CollectorConfig, data.get("collector")),
        otel=_section(OtelExporterConfig, data.get("otel")),
        logging=_section(LoggingConfig, data.get("logging")),
    ))


def load_config(path: str | Path | None = None) -> PulseMonitorConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``pulse_monitor.yaml`` in the current directory if *path* is None.
    A missing file means defaults.
    """
    data: dict[str, Any] = {}
    path = Path(DEFAULT_CONFIG_NAME) if path is None else Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            try:
                loaded = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ConfigError(f"cannot parse {path}: {exc}") from exc
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)


def dump_config(cfg: PulseMonitorConfig) -> str:
    """Render *cfg* as YAML."""
    return yaml.safe_dump(cfg.to_dict(), sort_keys=False)
