"""Agent catalog for the gateway log synchronizer.

The set of tracked agents is configuration, not something discovered from
the log. Agents referenced in the log but missing here are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentDefinition:
    """A registered agent: identifier used in lane names and display name."""

    id: str
    name: str


DEFAULT_AGENTS: tuple[AgentDefinition, ...] = (
    AgentDefinition("nova", "Nova"),
    AgentDefinition("zero", "Zero-1"),
    AgentDefinition("zero-2", "Zero-2"),
    AgentDefinition("zero-3", "Zero-3"),
    AgentDefinition("delta", "Delta"),
    AgentDefinition("bestie", "Bestie"),
    AgentDefinition("dexter", "Dexter"),
    AgentDefinition("flash", "Flash"),
)


class AgentRegistry:
    """Ordered, immutable catalog of known agents."""

    def __init__(self, agents: Sequence[AgentDefinition] = DEFAULT_AGENTS):
        """Initialize the registry.

        Args:
            agents: Agent definitions in display order.

        Raises:
            ValueError: If the catalog is empty or contains duplicate ids.
        """
        if not agents:
            raise ValueError("Agent registry must contain at least one agent")

        self._agents: dict[str, AgentDefinition] = {}
        for agent in agents:
            if agent.id in self._agents:
                raise ValueError(f"Duplicate agent id in registry: {agent.id}")
            self._agents[agent.id] = agent

    def __iter__(self) -> Iterator[AgentDefinition]:
        return iter(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def get(self, agent_id: str) -> AgentDefinition | None:
        return self._agents.get(agent_id)

    @property
    def ids(self) -> list[str]:
        return list(self._agents)


def load_agent_registry(path: str | Path) -> AgentRegistry:
    """Load an agent catalog from a YAML file.

    The file is expected to look like::

        agents:
          - id: nova
            name: Nova

    Args:
        path: Path to the YAML catalog.

    Returns:
        Registry with the agents in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the YAML cannot be parsed or entries are malformed.
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Agent catalog not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse agent catalog YAML: {e}") from e

    entries = data.get("agents") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"Agent catalog {config_path} must define an 'agents' list")

    agents: list[AgentDefinition] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("id"):
            raise ValueError(f"Agent entry #{index} in {config_path} is missing an 'id'")
        agent_id = str(entry["id"])
        agents.append(AgentDefinition(agent_id, str(entry.get("name") or agent_id)))

    logger.debug(f"Loaded {len(agents)} agents from {config_path}")
    return AgentRegistry(agents)
