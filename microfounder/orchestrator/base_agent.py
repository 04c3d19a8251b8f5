"""
BaseAgent: every agent persona implements this interface.

No frameworks. Just a class with a chat() method plus one generation
workflow per persona. Agents only talk to the store adapters they are
constructed with.
"""

import json
import logging
from enum import Enum
from typing import Any, Optional

from ..models.base import epoch_ms

logger = logging.getLogger(__name__)


class AgentKind(str, Enum):
    """The closed set of agent personas."""
    CEO = "ceo"
    MARKETING = "marketing"
    FINANCE = "finance"
    PRODUCT = "product"
    SALES = "sales"


def to_json(value: Any) -> str:
    """Pretty JSON for prompt context."""
    return json.dumps(value, indent=2, default=str)


class BaseAgent:
    """
    Base class for all agents. Subclass and implement chat().

    Attributes:
        kind:         AgentKind of this persona (its id is kind.value)
        display_name: Human-readable ("CEO Agent")
        description:  What it does (shown in the agent catalog)
        log_key:      Memory namespace for this agent's conversation log
    """

    kind: AgentKind
    display_name: str = ""
    description: str = ""
    log_key: str = ""

    def __init__(self, inference, memory, sql=None, buckets=None):
        self.inference = inference
        self.memory = memory
        self.sql = sql
        self.buckets = buckets

    @property
    def agent_id(self) -> str:
        return self.kind.value

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        """
        Answer a user message in this persona.

        Returns {"response": str, "agent_id": str}. Inference failures propagate.
        """
        raise NotImplementedError(f"Agent '{self.agent_id}' must implement chat()")

    # ── Shared helpers ───────────────────────────────────────────────

    async def _load_business(self, business_id: str) -> dict:
        """The business row, or {} when there is none."""
        rows = await self.sql.select("businesses", {"id": business_id})
        return rows[0] if rows else {}

    async def _read_context(self, key: str, user_id: str, default: Any = None) -> Any:
        value = await self.memory.read(key, user_id)
        if value is None:
            return {} if default is None else default
        return value

    async def _read_log(self, key: str, user_id: str) -> list:
        """An append-only memory log as a list ([] when absent)."""
        value = await self.memory.read(key, user_id)
        if value is None:
            return []
        return value if isinstance(value, list) else [value]

    async def _converse(
        self,
        user_id: str,
        message: str,
        system_prompt: str,
        history: Optional[list] = None,
    ) -> dict:
        """Run [system, *history, user] through inference and log both turns."""
        messages = [{"role": "system", "content": system_prompt}]
        for entry in history or []:
            if isinstance(entry, dict) and entry.get("role") in ("user", "assistant"):
                messages.append({"role": entry["role"], "content": entry.get("content", "")})
        messages.append({"role": "user", "content": message})

        response = await self.inference.chat(messages)

        await self.memory.append(self.log_key, user_id, {
            "role": "user",
            "content": message,
            "timestamp": epoch_ms(),
        })
        await self.memory.append(self.log_key, user_id, {
            "role": "assistant",
            "content": response,
            "timestamp": epoch_ms(),
        })
        logger.debug("%s chat for user=%s: %d chars", self.agent_id, user_id, len(response))

        return {"response": response, "agent_id": self.agent_id}

    def describe(self) -> dict:
        """Catalog entry. Status is static."""
        return {
            "id": self.agent_id,
            "name": self.display_name,
            "description": self.description,
            "status": "active",
        }
