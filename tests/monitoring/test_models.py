"""Tests for monitoring data models."""

from datetime import UTC, datetime

import pytest

from agentoffice.monitoring.models import (
    ActivityRecord,
    AgentState,
    EventKind,
    LaneEvent,
    StatsRecord,
)


class TestAgentState:
    """Tests for AgentState enum."""

    def test_enum_values(self) -> None:
        """Test that the wire values match what the browser expects."""
        assert AgentState.IDLE.value == "idle"
        assert AgentState.WORKING.value == "working"
        assert len(AgentState) == 2

    def test_enum_from_value(self) -> None:
        """Test creating enum from string value."""
        assert AgentState("working") is AgentState.WORKING


class TestLaneEvent:
    """Tests for LaneEvent dataclass."""

    def test_task_defaults_to_none(self) -> None:
        event = LaneEvent(EventKind.ENQUEUE, "nova")
        assert event.task is None

    def test_frozen(self) -> None:
        """Test that events are immutable."""
        event = LaneEvent(EventKind.TASK_DONE, "nova", "cron")
        with pytest.raises(AttributeError):
            event.agent_id = "zero"  # type: ignore[misc]

    def test_equality(self) -> None:
        assert LaneEvent(EventKind.ENQUEUE, "zero", "cron") == LaneEvent(
            EventKind.ENQUEUE, "zero", "cron"
        )


class TestActivityRecord:
    """Tests for ActivityRecord serialization."""

    def test_defaults_idle(self) -> None:
        record = ActivityRecord(id="nova", name="Nova", last_active_at=datetime.now(UTC))
        assert record.state is AgentState.IDLE
        assert record.current_task is None

    def test_to_dict_uses_client_field_names(self) -> None:
        """Test serialized keys match the HTTP contract."""
        last_active = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        record = ActivityRecord(
            id="nova",
            name="Nova",
            last_active_at=last_active,
            state=AgentState.WORKING,
            current_task="cron",
        )

        assert record.to_dict() == {
            "id": "nova",
            "name": "Nova",
            "state": "working",
            "currentTask": "cron",
            "lastActive": "2026-03-01T12:00:00+00:00",
        }


class TestStatsRecord:
    """Tests for StatsRecord serialization."""

    def test_defaults(self) -> None:
        stats = StatsRecord(agent_id="nova")
        assert stats.tasks_completed == 0
        assert stats.current_streak == 0
        assert stats.best_streak == 0
        assert stats.time_worked_today_seconds == 0.0
        assert stats.activity_counts == {}
        assert stats.favorite_activity is None
        assert stats.last_task_start is None

    def test_activity_counts_not_shared(self) -> None:
        """Test default factory gives each record its own histogram."""
        first = StatsRecord(agent_id="nova")
        second = StatsRecord(agent_id="zero")
        first.activity_counts["cron"] = 1
        assert second.activity_counts == {}

    def test_to_dict_copies_histogram(self) -> None:
        stats = StatsRecord(agent_id="nova", activity_counts={"cron": 2})
        data = stats.to_dict()
        data["activityCounts"]["cron"] = 99
        assert stats.activity_counts == {"cron": 2}

    def test_to_dict_keys(self) -> None:
        started = datetime(2026, 3, 1, 11, 59, tzinfo=UTC)
        stats = StatsRecord(
            agent_id="nova",
            tasks_completed=3,
            current_streak=3,
            best_streak=3,
            time_worked_today_seconds=42.5,
            activity_counts={"cron": 3},
            favorite_activity="cron",
            last_task_start=started,
        )

        assert stats.to_dict() == {
            "id": "nova",
            "tasksCompleted": 3,
            "currentStreak": 3,
            "bestStreak": 3,
            "timeWorkedToday": 42.5,
            "activityCounts": {"cron": 3},
            "favoriteActivity": "cron",
            "lastTaskStart": "2026-03-01T11:59:00+00:00",
        }
