"""Gateway log monitoring for AgentOffice.

This package tails the gateway log, extracts lane lifecycle events and
reconciles them into per-agent activity and statistics records.

Key Components:
    - models: Activity/statistics records, lane events and tail position
    - config: Configuration dataclass for the poll loop
    - registry: Catalog of known agents
    - log_reader: Incremental log tailing with rotation detection
    - event_extractor: Lane event extraction from raw log content
    - session_state: State table, reconciliation and inactivity sweep

Example:
    >>> from agentoffice.monitoring import (
    ...     AgentRegistry,
    ...     GatewayLogTail,
    ...     SessionStateTable,
    ...     extract_events,
    ... )
    >>> tail = GatewayLogTail("/tmp/openclaw/openclaw-2026-01-01.log")
    >>> table = SessionStateTable(AgentRegistry())
    >>> for event in extract_events(tail.poll()):
    ...     table.apply(event)
"""

from __future__ import annotations

from .config import MonitoringConfig
from .event_extractor import extract_events, normalize_agent_id
from .log_reader import GatewayLogTail
from .models import ActivityRecord, AgentState, EventKind, LaneEvent, StatsRecord, TailPosition
from .registry import AgentDefinition, AgentRegistry, load_agent_registry
from .session_state import SessionStateTable

__all__ = [
    "MonitoringConfig",
    "GatewayLogTail",
    "SessionStateTable",
    "AgentRegistry",
    "AgentDefinition",
    "load_agent_registry",
    "extract_events",
    "normalize_agent_id",
    "ActivityRecord",
    "StatsRecord",
    "AgentState",
    "EventKind",
    "LaneEvent",
    "TailPosition",
]
