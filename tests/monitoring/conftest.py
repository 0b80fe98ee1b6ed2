"""Shared fixtures for monitoring tests."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from agentoffice.monitoring.registry import AgentRegistry
from agentoffice.monitoring.session_state import SessionStateTable


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used as the state table clock."""
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def registry() -> AgentRegistry:
    """Registry with the built-in agent catalog."""
    return AgentRegistry()


@pytest.fixture
def state_table(registry: AgentRegistry, fixed_now: datetime) -> SessionStateTable:
    """State table whose clock is frozen at ``fixed_now``."""
    return SessionStateTable(registry, clock=lambda: fixed_now)


@pytest.fixture
def historical_log(tmp_path: Path) -> Path:
    """Create gateway log that already holds lane events from before startup."""
    log_file = tmp_path / "historical.log"
    log_file.write_text(
        "gateway booted\n"
        "lane enqueue: lane=session:agent:nova:cron:old queueSize=1\n"
        "lane enqueue: lane=session:agent:delta:cron:old queueSize=1\n"
    )
    return log_file
