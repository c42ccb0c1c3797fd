"""CLI interface for pulse_monitor."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading
import time
from dataclasses import asdict
from pathlib import Path

from . import __version__
from .config import ConfigError, PulseMonitorConfig, dump_config, load_config


def _collect_twice(cfg: PulseMonitorConfig):
    """Collect two cycles one interval apart so CPU usage has a delta."""
    from .collector.manager import MetricsCollector

    collector = MetricsCollector(cfg.collector)
    collector.collect_all()
    time.sleep(min(cfg.collector.interval_seconds, 1.0))
    return collector.collect_all()


def _cmd_snapshot(args: argparse.Namespace, cfg: PulseMonitorConfig) -> None:
    """Print one snapshot as a table or JSON."""
    snapshot = _collect_twice(cfg)
    if args.json:
        print(json.dumps(asdict(snapshot), indent=2))
        return

    from rich.console import Console

    from .formatter import render_table

    Console().print(render_table(snapshot))


def _cmd_copy(_args: argparse.Namespace, cfg: PulseMonitorConfig) -> None:
    """Print the clipboard export text."""
    from .formatter import clipboard_text

    print(clipboard_text(_collect_twice(cfg)))


def _cmd_watch(args: argparse.Namespace, cfg: PulseMonitorConfig) -> None:
    """Run the scheduler and print a status line per cycle."""
    from rich.console import Console

    from .collector.manager import MetricsCollector, MetricsSnapshot
    from .formatter import status_bar_text
    from .scheduler import CollectionScheduler

    console = Console()
    collector = MetricsCollector(cfg.collector)
    scheduler = CollectionScheduler(collector, cfg.collector)
    done = threading.Event()
    cycles = 0

    def _print(snapshot: MetricsSnapshot) -> None:
        nonlocal cycles
        avg = snapshot.averages
        console.print(
            f"{status_bar_text(snapshot.cpu.usage_percent)}  "
            f"MEM: {snapshot.memory.usage_percent}%  "
            f"{snapshot.disk_label}: {snapshot.disk.usage_percent}%  "
            f"[dim]avg cpu={avg.cpu_avg}% mem={avg.memory_avg}% disk={avg.disk_avg}%[/dim]"
        )
        cycles += 1
        if args.count and cycles >= args.count:
            done.set()

    scheduler.add_sink(_print)

    exporters = []
    if cfg.otel.enabled:
        from .exporter.otel import OtelExporter

        otel_exp = OtelExporter(cfg.otel)
        scheduler.add_sink(otel_exp)
        exporters.append(otel_exp)

    def _handle_signal(_sig: int, _frame: object) -> None:
        done.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    scheduler.start()
    console.print(f"pulse-monitor watching (interval={scheduler.interval}s)")
    console.print("Press Ctrl+C to stop.\n")
    try:
        while not done.wait(0.5):
            pass
    finally:
        scheduler.stop()
        for exp in exporters:
            exp.shutdown()


def _cmd_generate_config(args: argparse.Namespace, cfg: PulseMonitorConfig) -> None:
    """Write the effective configuration as YAML."""
    output = Path(args.output or "pulse_monitor.yaml")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_config(cfg), encoding="utf-8")
    print(f"Configuration written to {output}")


def _cmd_version(_args: argparse.Namespace, _cfg: PulseMonitorConfig) -> None:
    print(f"pulse_monitor {__version__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulse-monitor",
        description="Sample CPU, memory and disk usage with rolling averages",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to pulse_monitor.yaml")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    sub = parser.add_subparsers(dest="command")

    snap_p = sub.add_parser("snapshot", help="Print current usage once")
    snap_p.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    snap_p.set_defaults(func=_cmd_snapshot)

    watch_p = sub.add_parser("watch", help="Sample periodically until interrupted")
    watch_p.add_argument("--count", type=int, default=0, help="Stop after N cycles")
    watch_p.set_defaults(func=_cmd_watch)

    copy_p = sub.add_parser("copy", help="Print a Markdown export of current usage")
    copy_p.set_defaults(func=_cmd_copy)

    gen_p = sub.add_parser("generate-config", help="Write the effective configuration as YAML")
    gen_p.add_argument("--output", "-o", default=None, help="Output file path")
    gen_p.set_defaults(func=_cmd_generate_config)

    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the pulse-monitor CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        print(f"pulse-monitor: {exc}", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=(args.log_level or cfg.logging.level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args.func(args, cfg)


if __name__ == "__main__":
    main()
