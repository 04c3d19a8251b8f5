"""
AgentManager: single entry point over the five agent personas.

Owns one instance of each agent, built once over the four store adapters.
Stateless per call; every durable byte lives in the adapters.
"""

import logging
from typing import Optional

from .base_agent import AgentKind, BaseAgent
from .registry import AgentRegistry
from ..agents.ceo.handler import CEOAgent
from ..agents.finance.handler import FinanceAgent
from ..agents.marketing.handler import MarketingAgent
from ..agents.product.handler import ProductAgent
from ..agents.sales.handler import SalesAgent
from ..core.errors import NoBusinessFound, UnknownAgent
from ..models.base import epoch_ms

logger = logging.getLogger(__name__)


class AgentManager:
    def __init__(self, inference, memory, sql, buckets):
        self.inference = inference
        self.memory = memory
        self.sql = sql
        self.buckets = buckets

        self.ceo = CEOAgent(inference, memory, sql=sql)
        self.marketing = MarketingAgent(inference, memory, buckets=buckets)
        self.finance = FinanceAgent(inference, memory, sql=sql)
        self.product = ProductAgent(inference, memory, buckets=buckets)
        self.sales = SalesAgent(inference, memory)

        self.registry = AgentRegistry()
        for agent in (self.ceo, self.marketing, self.finance, self.product, self.sales):
            self.registry.register(agent)

    # ── Setup & catalog ──────────────────────────────────────────────

    async def initialize_agents(self, user_id: str, business_id: str) -> None:
        """Write the init marker and enable every agent. Overwrites, so repeat calls are harmless."""
        await self.memory.write("agents:initialized", user_id, {
            "business_id": business_id,
            "timestamp": epoch_ms(),
        })
        await self.memory.write("agents:config", user_id, {
            kind.value: {"enabled": True} for kind in AgentKind
        })
        logger.info("Agents initialized for user=%s business=%s", user_id, business_id)

    async def get_agents(self, user_id: str) -> list[dict]:
        # Static catalog; not derived from agents:config
        return self.registry.get_agent_descriptions()

    # ── Dispatch ─────────────────────────────────────────────────────

    def get_agent(self, agent_id: str) -> BaseAgent:
        try:
            kind = AgentKind(agent_id)
        except ValueError:
            raise UnknownAgent(agent_id)
        agent = self.registry.get(kind)
        if agent is None:
            raise UnknownAgent(agent_id)
        return agent

    async def resolve_business_id(self, user_id: str, business_id: Optional[str] = None) -> str:
        """The given business_id, or the user's first business."""
        if business_id:
            return business_id
        businesses = await self.sql.select("businesses", {"user_id": user_id})
        if businesses:
            return businesses[0]["id"]
        raise NoBusinessFound(user_id)

    async def chat_with_agent(
        self,
        user_id: str,
        agent_id: str,
        message: str,
        business_id: Optional[str] = None,
    ) -> dict:
        resolved = await self.resolve_business_id(user_id, business_id)
        agent = self.get_agent(agent_id)
        return await agent.chat(user_id, message, resolved)

    # ── Workflows ────────────────────────────────────────────────────

    async def create_weekly_plan(self, user_id: str, business_id: str) -> dict:
        return await self.ceo.create_weekly_plan(user_id, business_id)

    async def generate_marketing_assets(self, user_id: str, business_id: str, asset_type: str) -> dict:
        return await self.marketing.generate_assets(user_id, business_id, asset_type)

    async def run_financial_forecast(self, user_id: str, business_id: str) -> dict:
        return await self.finance.run_forecast(user_id, business_id)

    async def create_prd(self, user_id: str, business_id: str, feature: str) -> dict:
        return await self.product.create_prd(user_id, business_id, feature)

    async def generate_outreach_message(self, user_id: str, business_id: str, prospect_info: dict) -> dict:
        return await self.sales.generate_outreach_message(user_id, business_id, prospect_info)


# ── Global manager ───────────────────────────────────────────────────

_manager: Optional[AgentManager] = None


def get_agent_manager() -> AgentManager:
    """Get or create the process-wide manager over the process-wide stores."""
    global _manager
    if _manager is None:
        from ..services.buckets import get_bucket_store
        from ..services.inference import get_inference_client
        from ..services.memory import get_memory_store
        from ..services.sql import get_sql_store

        _manager = AgentManager(
            inference=get_inference_client(),
            memory=get_memory_store(),
            sql=get_sql_store(),
            buckets=get_bucket_store(),
        )
        logger.info(
            "Agent manager ready: %d agents [%s]",
            len(_manager.registry.get_agent_ids()),
            ", ".join(_manager.registry.get_agent_ids()),
        )
    return _manager


def reset_agent_manager() -> None:
    global _manager
    _manager = None
