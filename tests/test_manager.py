# =============================================================================
# Tests for AgentManager
# =============================================================================

from unittest.mock import AsyncMock

import pytest

from microfounder.core.errors import NoBusinessFound, UnknownAgent
from microfounder.orchestrator.base_agent import AgentKind


class TestInitialize:

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, manager, memory):
        await manager.initialize_agents("user-1", "biz-1")
        await manager.initialize_agents("user-1", "biz-1")

        config = await memory.read("agents:config", "user-1")
        assert config == {kind.value: {"enabled": True} for kind in AgentKind}
        assert len(config) == 5

        marker = await memory.read("agents:initialized", "user-1")
        assert marker["business_id"] == "biz-1"
        assert isinstance(marker["timestamp"], int)


class TestCatalog:

    @pytest.mark.asyncio
    async def test_get_agents(self, manager):
        agents = await manager.get_agents("user-1")

        assert [a["id"] for a in agents] == ["ceo", "marketing", "finance", "product", "sales"]
        assert all(a["status"] == "active" for a in agents)
        assert agents[0]["name"] == "CEO Agent"

    def test_get_agent(self, manager):
        assert manager.get_agent("finance") is manager.finance

    def test_unknown_agent(self, manager):
        with pytest.raises(UnknownAgent, match="^Unknown agent: cfo$"):
            manager.get_agent("cfo")


class TestChatDispatch:

    @pytest.mark.asyncio
    async def test_explicit_business_id_is_forwarded(self, manager):
        manager.ceo.chat = AsyncMock(return_value={"response": "ok", "agent_id": "ceo"})

        result = await manager.chat_with_agent("user-1", "ceo", "hi", business_id="biz-9")

        assert result["response"] == "ok"
        manager.ceo.chat.assert_awaited_once_with("user-1", "hi", "biz-9")

    @pytest.mark.asyncio
    async def test_first_business_is_resolved(self, manager, sql):
        await sql.insert("businesses", {"id": "biz-a", "user_id": "user-1"})
        await sql.insert("businesses", {"id": "biz-b", "user_id": "user-1"})
        manager.sales.chat = AsyncMock(return_value={"response": "ok", "agent_id": "sales"})

        await manager.chat_with_agent("user-1", "sales", "hi")

        manager.sales.chat.assert_awaited_once_with("user-1", "hi", "biz-a")

    @pytest.mark.asyncio
    async def test_no_business(self, manager, inference):
        with pytest.raises(NoBusinessFound, match="No business found for user"):
            await manager.chat_with_agent("user-1", "ceo", "hi")
        inference.chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_agent_after_business_resolves(self, manager, sql):
        await sql.insert("businesses", {"id": "biz-a", "user_id": "user-1"})
        with pytest.raises(UnknownAgent):
            await manager.chat_with_agent("user-1", "cfo", "hi")

    @pytest.mark.asyncio
    async def test_real_chat_round_trip(self, manager, sql, memory, sample_business):
        await sql.insert("businesses", sample_business)

        result = await manager.chat_with_agent("user-1", "finance", "Runway?")

        assert result == {"response": "assistant reply", "agent_id": "finance"}
        assert len(await memory.read("finance:conversations", "user-1")) == 2


class TestWorkflows:

    @pytest.mark.asyncio
    async def test_weekly_plan(self, manager, sql):
        result = await manager.create_weekly_plan("user-1", "biz-1")
        assert result["saved"] is True
        assert len(await sql.select("weekly_plans", {"user_id": "user-1"})) == 1

    @pytest.mark.asyncio
    async def test_marketing_assets(self, manager, buckets):
        result = await manager.generate_marketing_assets("user-1", "biz-1", "landing_page")
        assert result["assets"][0]["format"] == "html"
        assert len(await buckets.list("marketing-assets", "landing_page/")) == 1

    @pytest.mark.asyncio
    async def test_financial_forecast(self, manager, memory):
        await manager.run_financial_forecast("user-1", "biz-1")
        assert await memory.read("finance:latest_forecast", "user-1") is not None

    @pytest.mark.asyncio
    async def test_prd(self, manager):
        result = await manager.create_prd("user-1", "biz-1", "Exports")
        assert result == {"prd": "generated text", "saved": True}

    @pytest.mark.asyncio
    async def test_outreach(self, manager, memory):
        await manager.generate_outreach_message("user-1", "biz-1", {"name": "Ada"})
        log = await memory.read("sales:outreach_messages", "user-1")
        assert log[0]["prospect_info"] == {"name": "Ada"}
