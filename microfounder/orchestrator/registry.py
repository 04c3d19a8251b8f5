"""
Agent registry. Register agents by kind, look them up, list them.
"""

import logging
from typing import Optional

from .base_agent import AgentKind, BaseAgent

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Holds one agent per AgentKind."""

    def __init__(self):
        self._agents: dict[AgentKind, BaseAgent] = {}

    def register(self, agent: BaseAgent) -> None:
        """Register an agent under its kind."""
        if agent.kind in self._agents:
            logger.warning("Agent '%s' already registered, overwriting", agent.agent_id)
        self._agents[agent.kind] = agent
        logger.info("Registered agent: %s (%s)", agent.agent_id, agent.display_name)

    def get(self, kind: AgentKind) -> Optional[BaseAgent]:
        """Get an agent by kind. Returns None if not registered."""
        return self._agents.get(kind)

    def list_agents(self) -> list[BaseAgent]:
        """All agents in AgentKind order."""
        return [self._agents[k] for k in AgentKind if k in self._agents]

    def get_agent_ids(self) -> list[str]:
        return [a.agent_id for a in self.list_agents()]

    def get_agent_descriptions(self) -> list[dict]:
        """Catalog entries for all agents."""
        return [a.describe() for a in self.list_agents()]
