"""Configuration for the gateway log synchronizer.

This module defines the configuration dataclass that controls the poll loop:
the observed log path, the poll interval, the inactivity timeout and where
the agent catalog comes from.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class MonitoringConfig:
    """Configuration for the gateway log synchronizer.

    Attributes:
        log_path: Gateway log to tail. May contain strftime placeholders, in
            which case the path is resolved against the current local date
            (default: /tmp/openclaw/openclaw-%Y-%m-%d.log).
        poll_interval_seconds: Seconds between poll cycles (default: 2).
        max_inactive_seconds: Seconds a working agent may go without events
            before it is demoted to idle (default: 300).
        agents_file: Optional YAML agent catalog replacing the built-in one.
    """

    log_path: str = "/tmp/openclaw/openclaw-%Y-%m-%d.log"
    poll_interval_seconds: float = 2.0
    max_inactive_seconds: float = 300.0
    agents_file: str | None = None

    @classmethod
    def from_env(cls) -> MonitoringConfig:
        """Build a configuration from ``AGENTOFFICE_*`` environment variables.

        Raises:
            ValueError: If a numeric variable is not a positive number.
        """
        return cls(
            log_path=os.getenv("AGENTOFFICE_LOG_PATH", cls.log_path),
            poll_interval_seconds=_env_float(
                "AGENTOFFICE_POLL_INTERVAL", cls.poll_interval_seconds
            ),
            max_inactive_seconds=_env_float("AGENTOFFICE_MAX_INACTIVE", cls.max_inactive_seconds),
            agents_file=os.getenv("AGENTOFFICE_AGENTS_FILE") or None,
        )

    @property
    def is_dated(self) -> bool:
        """Whether ``log_path`` changes with the calendar date."""
        return "%" in self.log_path

    def resolve_log_path(self, now: datetime | None = None) -> str:
        """Return the concrete log path for ``now`` (local time)."""
        if not self.is_dated:
            return self.log_path
        return (now or datetime.now()).strftime(self.log_path)
