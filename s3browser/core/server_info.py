"""Build version and server uptime reporting."""
from __future__ import annotations

import platform
import time
from datetime import datetime, timedelta, timezone

from s3browser.core.config import Settings

DEV_VERSION = "dev"


class ServerInfo:
    """Version metadata injected at build time plus process start time."""

    def __init__(self, settings: Settings) -> None:
        self.version = settings.app_version or DEV_VERSION
        self.git_commit = settings.git_commit or "unknown"
        self.build_time = settings.build_time or "unknown"
        self._started_monotonic = time.monotonic()
        self.started_at = datetime.now(timezone.utc)

    def version_string(self) -> str:
        """Short label for display, ``dev-<commit>`` for development builds."""

        if self.version == DEV_VERSION:
            return f"{DEV_VERSION}-{self.git_commit[:8]}"
        return self.version

    def is_release(self) -> bool:
        return self.version != DEV_VERSION and "-" not in self.version

    def uptime_seconds(self) -> float:
        return max(0.0, time.monotonic() - self._started_monotonic)

    def as_dict(self) -> dict[str, str | bool]:
        return {
            "version": self.version,
            "version_string": self.version_string(),
            "git_commit": self.git_commit,
            "build_time": self.build_time,
            "python_version": platform.python_version(),
            "is_release": self.is_release(),
            "started_at": self.started_at.isoformat(),
            "uptime": format_uptime(self.uptime_seconds()),
        }


def format_uptime(seconds: float) -> str:
    """Render uptime as an HH:MM:SS-like string."""

    return str(timedelta(seconds=int(seconds)))
