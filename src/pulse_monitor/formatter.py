"""Text renderings of a metrics snapshot for status lines, tooltips and export."""

from __future__ import annotations

from datetime import datetime

from rich.table import Table

from .collector.manager import MetricsSnapshot


def _pad(value: int) -> str:
    return str(value).zfill(2)


def status_bar_text(cpu_usage: int) -> str:
    """Short status line, e.g. ``CPU: 07%``."""
    return f"CPU: {_pad(cpu_usage)}%"


def _cpu_line(snapshot: MetricsSnapshot) -> str:
    return f"{_pad(snapshot.cpu.usage_percent)}% @ {snapshot.cpu.speed_mhz:.0f} MHz"


def _memory_line(snapshot: MetricsSnapshot) -> str:
    mem = snapshot.memory
    return f"{mem.used_mb} MB / {mem.total_mb} MB ({mem.usage_percent}%)"


def _disk_line(snapshot: MetricsSnapshot) -> str:
    disk = snapshot.disk
    return f"{disk.used_gb} GB / {disk.total_gb} GB ({disk.usage_percent}%)"


def detail_markdown(snapshot: MetricsSnapshot) -> str:
    """Markdown detail view with current readings and the rolling averages."""
    avg = snapshot.averages
    return "".join([
        "Current\n\n---\n\n",
        f"CPU Usage: {_cpu_line(snapshot)}\n\n",
        f"Memory Usage: {_memory_line(snapshot)}\n\n",
        f"{snapshot.disk_label}: {_disk_line(snapshot)}\n\n",
        "1-Minute Average\n\n---\n\n",
        f"CPU: {_pad(avg.cpu_avg)}%\n\n",
        f"Memory: {avg.memory_avg}%\n\n",
        f"Disk: {avg.disk_avg}%",
    ])


def clipboard_text(snapshot: MetricsSnapshot, now: datetime | None = None) -> str:
    """Plain-text (Markdown) export suitable for copying."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    avg = snapshot.averages
    return "\n".join([
        f"# System Metrics ({stamp})",
        "",
        "## Current Status",
        f"- **CPU Usage:** {_cpu_line(snapshot)}",
        f"- **Memory Usage:** {_memory_line(snapshot)}",
        f"- **{snapshot.disk_label}:** {_disk_line(snapshot)}",
        "",
        "## 1-Minute Average",
        f"- **CPU:** {_pad(avg.cpu_avg)}%",
        f"- **Memory:** {avg.memory_avg}%",
        f"- **Disk:** {avg.disk_avg}%",
    ])


def render_table(snapshot: MetricsSnapshot) -> Table:
    """Rich table of current readings next to their averages."""
    table = Table(title="System Metrics", show_lines=True)
    table.add_column("Resource", style="cyan", width=24)
    table.add_column("Current", justify="right", width=28)
    table.add_column("Average", justify="right", style="magenta", width=9)

    avg = snapshot.averages
    table.add_row("CPU Usage", _cpu_line(snapshot), f"{_pad(avg.cpu_avg)}%")
    table.add_row("Memory Usage", _memory_line(snapshot), f"{avg.memory_avg}%")
    disk_style = "" if snapshot.disk.total_gb else "dim"
    current = f"[{disk_style}]{_disk_line(snapshot)}[/{disk_style}]" if disk_style else _disk_line(snapshot)
    table.add_row(snapshot.disk_label, current, f"{avg.disk_avg}%")
    return table
