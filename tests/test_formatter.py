"""Tests for snapshot text renderings."""

from datetime import datetime

from rich.console import Console

from pulse_monitor.collector.base import CpuInfo, DiskInfo, MemoryInfo
from pulse_monitor.collector.manager import MetricsSnapshot
from pulse_monitor.formatter import clipboard_text, detail_markdown, render_table, status_bar_text
from pulse_monitor.history import Averages


def _snapshot(**overrides) -> MetricsSnapshot:
    values = dict(
        cpu=CpuInfo(usage_percent=7, speed_mhz=2400.0),
        memory=MemoryInfo(used_mb=12000, total_mb=16000, usage_percent=75),
        disk=DiskInfo(free_gb=125, total_gb=500, usage_percent=75),
        averages=Averages(cpu_avg=5, memory_avg=74, disk_avg=75),
        disk_label="Disk Usage (/)",
        timestamp=0.0,
    )
    values.update(overrides)
    return MetricsSnapshot(**values)


def test_status_bar_text():
    assert status_bar_text(7) == "CPU: 07%"
    assert status_bar_text(42) == "CPU: 42%"
    assert status_bar_text(100) == "CPU: 100%"
    assert status_bar_text(0) == "CPU: 00%"


def test_detail_markdown():
    text = detail_markdown(_snapshot())
    assert "CPU Usage: 07% @ 2400 MHz" in text
    assert "Memory Usage: 12000 MB / 16000 MB (75%)" in text
    assert "Disk Usage (/): 375 GB / 500 GB (75%)" in text
    assert "CPU: 05%" in text
    assert "Memory: 74%" in text


def test_clipboard_text():
    text = clipboard_text(_snapshot(), now=datetime(2024, 5, 1, 12, 30, 0))
    lines = text.splitlines()
    assert lines[0] == "# System Metrics (2024-05-01 12:30:00)"
    assert "## Current Status" in lines
    assert "- **Disk Usage (/):** 375 GB / 500 GB (75%)" in lines
    assert "## 1-Minute Average" in lines
    assert lines[-3:] == ["- **CPU:** 05%", "- **Memory:** 74%", "- **Disk:** 75%"]


def test_render_table():
    console = Console(record=True, width=120)
    console.print(render_table(_snapshot(disk=DiskInfo.empty())))
    output = console.export_text()
    assert "System Metrics" in output
    assert "12000 MB / 16000 MB (75%)" in output
    assert "0 GB / 0 GB (0%)" in output
