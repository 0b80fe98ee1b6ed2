"""Per-agent activity and statistics tables, and the rules that mutate them."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .models import ActivityRecord, AgentState, EventKind, LaneEvent, StatsRecord
from .registry import AgentRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionStateTable:
    """
    Thread-safe owner of every agent's ActivityRecord and StatsRecord.

    Records are created up front for each registered agent and only ever
    mutated through ``apply`` (reconciliation of lane events) and ``sweep``
    (inactivity timeout), apart from zeroing worked time once the local day
    changes. Readers get plain dict snapshots built under the same lock, so
    they never see a record halfway through a transition.

    Thread Safety:
        - All public methods are thread-safe
        - Uses RLock so accessors can be composed while holding it

    Example:
        table = SessionStateTable(AgentRegistry())
        table.apply(LaneEvent(EventKind.ENQUEUE, "nova", "cron"))
        table.sweep(max_inactive_seconds=300)
        print(table.get_agent_states())
    """

    def __init__(
        self,
        registry: AgentRegistry,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the tables with every registered agent idle.

        Args:
            registry: Catalog of agents to track.
            clock: Source of timezone-aware "now" timestamps.
        """
        self.registry = registry
        self._clock = clock
        self._lock = threading.RLock()

        now = clock()
        self._activity: dict[str, ActivityRecord] = {
            agent.id: ActivityRecord(id=agent.id, name=agent.name, last_active_at=now)
            for agent in registry
        }
        self._stats: dict[str, StatsRecord] = {
            agent.id: StatsRecord(agent_id=agent.id) for agent in registry
        }

    # ============================================================================
    # Reconciliation
    # ============================================================================

    def apply(self, event: LaneEvent, now: datetime | None = None) -> bool:
        """
        Apply one lane event to the tables.

        Args:
            event: Event extracted from the log.
            now: Time to record; defaults to the clock.

        Returns:
            True if the event matched a registered agent, False if dropped.
        """
        now = now or self._clock()

        with self._lock:
            record = self._activity.get(event.agent_id)
            if record is None:
                return False

            if event.kind is EventKind.ENQUEUE:
                self._mark_working(record, event, now)
            elif event.kind is EventKind.TASK_DONE:
                self._mark_done(record, event, now)

        logger.debug(
            "Lane event applied",
            extra={"agent_id": event.agent_id, "kind": event.kind.value, "task": event.task},
        )
        return True

    def _mark_working(self, record: ActivityRecord, event: LaneEvent, now: datetime) -> None:
        record.state = AgentState.WORKING
        record.last_active_at = now
        if event.task:
            record.current_task = event.task

        stats = self._stats[record.id]
        # A second enqueue while a task is in flight keeps the original start.
        if stats.last_task_start is None:
            stats.last_task_start = now

    def _mark_done(self, record: ActivityRecord, event: LaneEvent, now: datetime) -> None:
        label = event.task or record.current_task

        record.state = AgentState.IDLE
        record.current_task = None
        record.last_active_at = now

        self._record_completion(self._stats[record.id], label, now)

    def _record_completion(self, stats: StatsRecord, label: str | None, now: datetime) -> None:
        stats.tasks_completed += 1
        stats.current_streak += 1
        stats.best_streak = max(stats.best_streak, stats.current_streak)

        today = now.astimezone().date()
        if stats.worked_day != today:
            stats.worked_day = today
            stats.time_worked_today_seconds = 0.0

        if stats.last_task_start is not None:
            elapsed = (now - stats.last_task_start).total_seconds()
            stats.time_worked_today_seconds += max(elapsed, 0.0)
            stats.last_task_start = None

        if label:
            count = stats.activity_counts.get(label, 0) + 1
            stats.activity_counts[label] = count
            # Strictly greater: on a tie the earlier favorite stays.
            if (
                stats.favorite_activity is None
                or count > stats.activity_counts[stats.favorite_activity]
            ):
                stats.favorite_activity = label

    def _roll_over_day(self, now: datetime) -> None:
        """Zero the worked time of agents whose last completion was on an earlier day."""
        today = now.astimezone().date()
        for stats in self._stats.values():
            if stats.worked_day is not None and stats.worked_day < today:
                stats.worked_day = today
                stats.time_worked_today_seconds = 0.0

    # ============================================================================
    # Inactivity sweep
    # ============================================================================

    def sweep(self, max_inactive_seconds: float, now: datetime | None = None) -> list[str]:
        """
        Demote agents stuck in ``working`` with no events for too long.

        Only state and current task change; ``last_active_at`` and task
        counters are left alone since no task actually completed. Worked time
        from a previous day is zeroed.

        Args:
            max_inactive_seconds: Allowed silence before demotion.
            now: Reference time; defaults to the clock.

        Returns:
            Ids of the agents that were demoted.
        """
        now = now or self._clock()
        demoted: list[str] = []

        with self._lock:
            for record in self._activity.values():
                if record.state is not AgentState.WORKING:
                    continue
                if (now - record.last_active_at).total_seconds() > max_inactive_seconds:
                    record.state = AgentState.IDLE
                    record.current_task = None
                    demoted.append(record.id)
            self._roll_over_day(now)

        if demoted:
            logger.info(f"Demoted inactive agents to idle: {', '.join(demoted)}")
        return demoted

    # ============================================================================
    # Read accessors
    # ============================================================================

    def get_agent_states(self) -> list[dict[str, Any]]:
        """Return one activity snapshot per registered agent, in registry order."""
        with self._lock:
            return [record.to_dict() for record in self._activity.values()]

    def get_agent_stats(self) -> list[dict[str, Any]]:
        """Return statistics snapshots for all registered agents."""
        with self._lock:
            self._roll_over_day(self._clock())
            return [stats.to_dict() for stats in self._stats.values()]

    def get_agent_stats_by_id(self, agent_id: str) -> dict[str, Any] | None:
        """Return the statistics snapshot for one agent, or None if unknown."""
        with self._lock:
            self._roll_over_day(self._clock())
            stats = self._stats.get(agent_id)
            return stats.to_dict() if stats is not None else None

    # Live records, for tests. Callers must not mutate them concurrently.

    def _get_activity(self, agent_id: str) -> ActivityRecord | None:
        with self._lock:
            return self._activity.get(agent_id)

    def _get_stats(self, agent_id: str) -> StatsRecord | None:
        with self._lock:
            return self._stats.get(agent_id)
