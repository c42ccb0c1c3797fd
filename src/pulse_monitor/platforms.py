"""Per-platform choice of the filesystem path watched for disk usage."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

CLOUD_CONTAINER_ENV = "CODESPACES"
WORKSPACE_FOLDER_ENV = "CODESPACE_VSCODE_FOLDER"
DEFAULT_DISK_LABEL = "Disk Usage"


@dataclass(slots=True, frozen=True)
class DiskTarget:
    """Monitored path (``None`` when disk monitoring is unsupported) and its label."""

    path: str | None
    label: str


def in_cloud_container(environ: Mapping[str, str]) -> bool:
    return bool(environ.get(CLOUD_CONTAINER_ENV))


def _platform_family(platform: str) -> str:
    if platform.startswith("linux"):
        return "linux"
    return platform


def resolve_disk_target(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: str | None = None,
) -> DiskTarget:
    """Resolve the monitored path and label for *platform* and *environ*.

    Defaults to ``sys.platform`` and ``os.environ``. Nothing is cached: every
    call looks at the environment it is given.
    """
    platform = _platform_family(sys.platform if platform is None else platform)
    environ = os.environ if environ is None else environ
    cloud = in_cloud_container(environ)

    if platform == "win32":
        if cloud:
            return DiskTarget(home or str(Path.home()), "Disk Usage (Home)")
        return DiskTarget("C:\\", "Disk Usage (C:)")
    if platform == "darwin":
        return DiskTarget("/", "Disk Usage (/)")
    if platform == "linux":
        if cloud:
            folder = environ.get(WORKSPACE_FOLDER_ENV) or "/"
            return DiskTarget(os.path.abspath(folder), "Disk Usage (Workspace)")
        return DiskTarget("/", "Disk Usage (/)")
    return DiskTarget(None, DEFAULT_DISK_LABEL)
