"""Data models for the gateway log synchronizer.

This module defines the core data structures used throughout the monitoring
package: agent activity and statistics records, the tagged lane events
produced by the extractor, and the tail reading position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class AgentState(str, Enum):
    """Live activity state of an agent.

    Attributes:
        IDLE: Agent has no task in flight.
        WORKING: Agent has an enqueued task that has not finished yet.
    """

    IDLE = "idle"
    WORKING = "working"


class EventKind(str, Enum):
    """Kind of lane lifecycle event recognised in the gateway log."""

    ENQUEUE = "enqueue"
    TASK_DONE = "taskDone"


@dataclass(frozen=True)
class LaneEvent:
    """A single session lifecycle event extracted from one log line.

    Attributes:
        kind: Whether the lane was enqueued or finished.
        agent_id: Normalized agent identifier (``-cron`` suffix stripped).
        task: Session kind taken from the lane, used as the task label.
    """

    kind: EventKind
    agent_id: str
    task: str | None = None


@dataclass
class ActivityRecord:
    """Current activity of one registered agent.

    ``current_task`` is only set while ``state`` is ``WORKING``.

    Attributes:
        id: Agent identifier from the registry.
        name: Display name from the registry.
        state: Live activity state.
        current_task: Label of the task in flight, if any.
        last_active_at: Time of the most recent event affecting this agent.
    """

    id: str
    name: str
    last_active_at: datetime
    state: AgentState = AgentState.IDLE
    current_task: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the field names the browser client expects."""
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state.value,
            "currentTask": self.current_task,
            "lastActive": self.last_active_at.isoformat(),
        }


@dataclass
class StatsRecord:
    """Rolling productivity statistics for one registered agent.

    Attributes:
        agent_id: Agent identifier from the registry.
        tasks_completed: Number of completed tasks.
        current_streak: Consecutive completed tasks.
        best_streak: Highest value ``current_streak`` has reached.
        time_worked_today_seconds: Time spent on tasks completed today.
        activity_counts: Completed task count per task label.
        favorite_activity: Label with the highest count, first to reach it wins.
        last_task_start: Start of the task in flight, cleared on completion.
        worked_day: Local calendar day ``time_worked_today_seconds`` refers to.
    """

    agent_id: str
    tasks_completed: int = 0
    current_streak: int = 0
    best_streak: int = 0
    time_worked_today_seconds: float = 0.0
    activity_counts: dict[str, int] = field(default_factory=dict)
    favorite_activity: str | None = None
    last_task_start: datetime | None = None
    worked_day: date | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the HTTP layer."""
        return {
            "id": self.agent_id,
            "tasksCompleted": self.tasks_completed,
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "timeWorkedToday": self.time_worked_today_seconds,
            "activityCounts": dict(self.activity_counts),
            "favoriteActivity": self.favorite_activity,
            "lastTaskStart": self.last_task_start.isoformat() if self.last_task_start else None,
        }


@dataclass
class TailPosition:
    """Snapshot of where the tail reader is in the observed log file.

    Attributes:
        file_path: Path of the log file under observation.
        byte_offset: Number of bytes already consumed.
        last_read_timestamp: ISO 8601 timestamp of the last successful read.
    """

    file_path: str
    byte_offset: int
    last_read_timestamp: str | None
