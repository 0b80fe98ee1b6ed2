"""
GatewayLogSynchronizer - Background poll loop that keeps agent state in sync with the gateway log.

Each cycle tails the gateway log, extracts lane events, reconciles them into
the session state table and demotes agents that went quiet. One cycle always
finishes before the next one is scheduled.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from .monitoring.config import MonitoringConfig
from .monitoring.event_extractor import extract_events
from .monitoring.log_reader import GatewayLogTail
from .monitoring.models import TailPosition
from .monitoring.registry import AgentRegistry, load_agent_registry
from .monitoring.session_state import SessionStateTable


class GatewayLogSynchronizer:
    """
    Tails the gateway log and derives live per-agent state from it.

    Owns the tail reader and the session state table. Constructed once by
    the process entry point and handed to the HTTP layer, which only calls
    the read accessors.
    """

    def __init__(
        self,
        config: MonitoringConfig,
        registry: AgentRegistry | None = None,
        state: SessionStateTable | None = None,
    ):
        """
        Initialize the synchronizer.

        Args:
            config: Monitoring configuration (log path, interval, timeout)
            registry: Agent catalog; loaded from config.agents_file or the built-in one
            state: Pre-built state table, mostly for tests
        """
        self.config = config

        if registry is None:
            registry = (
                load_agent_registry(config.agents_file) if config.agents_file else AgentRegistry()
            )
        self.registry = registry
        self.state = state or SessionStateTable(registry)

        self.tail = GatewayLogTail(config.resolve_log_path())
        # Set by update_log_path; while set, dated rollover is not followed.
        self._log_path_override: str | None = None

        self._task: asyncio.Task | None = None
        self._running = False
        self._logger = logging.getLogger(__name__)

    # ============================================================================
    # Lifecycle Methods
    # ============================================================================

    def start(self) -> None:
        """
        Start tailing from the current end of the log.

        Existing content is skipped. Performs one poll right away, then
        schedules the background loop on the running event loop. Calling it
        while already running does nothing.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self._running:
            return

        loop = asyncio.get_running_loop()
        self.tail.reset(self._log_path_override or self.config.resolve_log_path())
        self.tail.seek_to_end()
        self._running = True

        self._logger.info(
            f"Starting gateway log sync on {self.tail.file_path} "
            f"(offset {self.tail.byte_offset}, poll interval: {self.config.poll_interval_seconds}s, "
            f"inactive timeout: {self.config.max_inactive_seconds}s)"
        )

        self.poll_once()
        self._task = loop.create_task(self._poll_loop())

    def stop(self) -> None:
        """
        Stop polling and cancel the pending cycle.

        Idempotent and synchronous, so it can be called from a signal handler.
        """
        if not self._running:
            return

        self._running = False
        if self._task is not None:
            self._task.cancel()
        self._logger.info("Gateway log sync stopped")

    async def shutdown(self, timeout: float = 5.0) -> None:
        """
        Stop polling and wait for the background task to finish.

        Args:
            timeout: Maximum time to wait for the task (seconds)
        """
        self.stop()

        task, self._task = self._task, None
        if task is None:
            return

        try:
            await asyncio.wait_for(task, timeout=timeout)
        except TimeoutError:
            self._logger.warning("Gateway log sync task did not stop within timeout")
        except asyncio.CancelledError:
            self._logger.debug("Gateway log sync task cancelled")

    def is_running(self) -> bool:
        """Check if the poll loop is active."""
        return self._running and self._task is not None and not self._task.done()

    def update_log_path(self, log_path: str) -> None:
        """
        Switch to another log file and read it from its first byte.

        The explicit path stays in effect across restarts and replaces any
        date-based path from the configuration.

        Args:
            log_path: New gateway log path
        """
        self._log_path_override = log_path
        self._switch_log(log_path)

    def _switch_log(self, log_path: str) -> None:
        self.tail.reset(log_path)
        self._logger.info(f"Now tailing {log_path} from offset 0")

    # ============================================================================
    # Core Polling Methods
    # ============================================================================

    async def _poll_loop(self) -> None:
        """
        Run poll cycles until stopped.

        Sleeps a full interval after each cycle, so cycles never overlap.
        """
        while self._running:
            try:
                await asyncio.sleep(self.config.poll_interval_seconds)
                if not self._running:
                    break
                self.poll_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self._logger.critical(f"Critical error in gateway log sync loop: {e}")

    def poll_once(self, now: datetime | None = None) -> int:
        """
        Run a single tail -> extract -> reconcile -> sweep cycle.

        Errors while reading or applying are logged and swallowed; the
        inactivity sweep runs regardless.

        Args:
            now: Reference time for reconciliation and the sweep

        Returns:
            Number of events that matched a registered agent
        """
        applied = 0

        try:
            self._follow_dated_log(now)

            chunk = self.tail.poll()
            if chunk:
                events = extract_events(chunk)
                for event in events:
                    if self.state.apply(event, now):
                        applied += 1
                self._logger.debug(f"Extracted {len(events)} lane events, applied {applied}")
        except Exception as e:
            self._logger.error(f"Error reading gateway log {self.tail.file_path}: {e}")

        self.state.sweep(self.config.max_inactive_seconds, now)
        return applied

    def _follow_dated_log(self, now: datetime | None) -> None:
        """Switch to the new file when a date-based log path rolls over."""
        if not self.config.is_dated or self._log_path_override is not None:
            return

        resolved = self.config.resolve_log_path(now.astimezone() if now else None)
        if Path(resolved) != self.tail.file_path:
            self._logger.info(f"Gateway log rolled over: {self.tail.file_path} -> {resolved}")
            self._switch_log(resolved)

    # ============================================================================
    # Read Accessors
    # ============================================================================

    def get_agent_states(self) -> list[dict[str, Any]]:
        """Activity snapshot for every registered agent, in registry order."""
        return self.state.get_agent_states()

    def get_agent_stats(self) -> list[dict[str, Any]]:
        """Statistics snapshot for every registered agent."""
        return self.state.get_agent_stats()

    def get_agent_stats_by_id(self, agent_id: str) -> dict[str, Any] | None:
        """Statistics snapshot for one agent, or None if it isn't registered."""
        return self.state.get_agent_stats_by_id(agent_id)

    def position(self) -> TailPosition:
        """Current tail position, for diagnostics."""
        return self.tail.position()
