# =============================================================================
# Tests for the five agent personas
# =============================================================================
# Stores are local-only; inference is an AsyncMock.
# =============================================================================

import json
import re

import pytest

from microfounder.agents.ceo.handler import CEOAgent
from microfounder.agents.finance.handler import FinanceAgent, parse_forecast
from microfounder.agents.marketing.handler import MarketingAgent
from microfounder.agents.product.handler import ProductAgent
from microfounder.agents.sales.handler import SalesAgent
from microfounder.core.errors import InferenceFailed


def _sent_messages(inference) -> list[dict]:
    return inference.chat.await_args.args[0]


# ── CEO ───────────────────────────────────────────────────────────────

class TestCEOAgent:

    @pytest.mark.asyncio
    async def test_chat_logs_both_turns(self, inference, memory, sql, sample_business):
        await sql.insert("businesses", sample_business)
        agent = CEOAgent(inference, memory, sql=sql)

        result = await agent.chat("user-1", "What should I focus on?", "biz-1")

        assert result == {"response": "assistant reply", "agent_id": "ceo"}
        log = await memory.read("ceo:recent", "user-1")
        assert [entry["role"] for entry in log] == ["user", "assistant"]
        assert log[0]["content"] == "What should I focus on?"
        assert isinstance(log[0]["timestamp"], int)

    @pytest.mark.asyncio
    async def test_chat_prompt_carries_profile_and_history(self, inference, memory, sql, sample_business):
        await sql.insert("businesses", sample_business)
        for i in range(7):
            await memory.append("ceo:recent", "user-1", {"role": "user", "content": f"m{i}"})
        agent = CEOAgent(inference, memory, sql=sql)

        await agent.chat("user-1", "next", "biz-1")

        messages = _sent_messages(inference)
        assert messages[0]["role"] == "system"
        assert "Type: SaaS" in messages[0]["content"]
        # Last five turns only, then the new message
        assert [m["content"] for m in messages[1:]] == ["m2", "m3", "m4", "m5", "m6", "next"]

    @pytest.mark.asyncio
    async def test_chat_without_business_uses_defaults(self, inference, memory, sql):
        agent = CEOAgent(inference, memory, sql=sql)
        await agent.chat("user-1", "hi", "missing")

        system = _sent_messages(inference)[0]["content"]
        assert "Type: Unknown" in system
        assert "Stage: Early" in system

    @pytest.mark.asyncio
    async def test_weekly_plan_is_saved_twice(self, inference, memory, sql, sample_business):
        await sql.insert("businesses", sample_business)
        agent = CEOAgent(inference, memory, sql=sql)

        result = await agent.create_weekly_plan("user-1", "biz-1")

        assert result == {"plan": "generated text", "saved": True}
        plans = await memory.read("ceo:weekly_plans", "user-1")
        assert plans[0]["plan"] == "generated text"
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", plans[0]["week"])

        rows = await sql.select("weekly_plans", {"business_id": "biz-1"})
        assert len(rows) == 1
        assert rows[0]["user_id"] == "user-1"
        assert rows[0]["week"] == plans[0]["week"]

    @pytest.mark.asyncio
    async def test_weekly_plan_prompt_includes_previous_two(self, inference, memory, sql):
        for i in range(3):
            await memory.append("ceo:weekly_plans", "user-1", {"plan": f"plan-{i}"})
        agent = CEOAgent(inference, memory, sql=sql)

        await agent.create_weekly_plan("user-1", "biz-1")

        prompt = inference.infer.await_args.args[0]
        assert "plan-0" not in prompt
        assert "plan-1" in prompt and "plan-2" in prompt

    @pytest.mark.asyncio
    async def test_inference_failure_writes_nothing(self, inference, memory, sql):
        inference.infer.side_effect = InferenceFailed("Inference failed: boom")
        agent = CEOAgent(inference, memory, sql=sql)

        with pytest.raises(InferenceFailed):
            await agent.create_weekly_plan("user-1", "biz-1")

        assert await memory.read("ceo:weekly_plans", "user-1") is None
        assert await sql.select("weekly_plans") == []

    @pytest.mark.asyncio
    async def test_chat_failure_logs_nothing(self, inference, memory, sql):
        inference.chat.side_effect = InferenceFailed("Chat inference failed: boom")
        agent = CEOAgent(inference, memory, sql=sql)

        with pytest.raises(InferenceFailed, match="Chat inference failed"):
            await agent.chat("user-1", "hi", "biz-1")
        assert await memory.read("ceo:recent", "user-1") is None


# ── Marketing ─────────────────────────────────────────────────────────

class TestMarketingAgent:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("asset_type,fmt", [
        ("ad_copy", "json"),
        ("landing_page", "html"),
        ("email_campaign", "json"),
    ])
    async def test_generate_assets(self, inference, memory, buckets, asset_type, fmt):
        agent = MarketingAgent(inference, memory, buckets=buckets)

        result = await agent.generate_assets("user-1", "biz-1", asset_type)

        asset = result["assets"][0]
        assert result["saved"] is True
        assert asset["type"] == asset_type
        assert asset["format"] == fmt
        assert asset["content"] == "generated text"
        assert re.fullmatch(rf"{asset_type}/biz-1/\d+\.{fmt}", asset["key"])

        assert await buckets.download("marketing-assets", asset["key"]) == "generated text"
        metadata = await buckets.get_metadata("marketing-assets", asset["key"])
        assert metadata["asset_type"] == asset_type
        assert metadata["user_id"] == "user-1"

        refs = await memory.read("marketing:assets", "user-1")
        assert refs[0]["key"] == asset["key"]
        assert "content" not in refs[0]

    @pytest.mark.asyncio
    async def test_unknown_asset_type(self, inference, memory, buckets):
        agent = MarketingAgent(inference, memory, buckets=buckets)
        with pytest.raises(ValueError, match="Unsupported asset type"):
            await agent.generate_assets("user-1", "biz-1", "billboard")
        inference.infer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_chat_uses_business_context(self, inference, memory, buckets):
        await memory.write("business:context", "user-1", {"industry": "Fintech"})
        agent = MarketingAgent(inference, memory, buckets=buckets)

        result = await agent.chat("user-1", "Campaign ideas?", "biz-1")

        assert result["agent_id"] == "marketing"
        assert "Fintech" in _sent_messages(inference)[0]["content"]
        assert len(await memory.read("marketing:conversations", "user-1")) == 2


# ── Finance ───────────────────────────────────────────────────────────

class TestFinanceAgent:

    def test_parse_forecast_json(self):
        assert parse_forecast('{"months": [1, 2]}') == {"months": [1, 2]}

    def test_parse_forecast_text(self):
        assert parse_forecast("Revenue grows.") == {"text": "Revenue grows.", "parsed": False}

    @pytest.mark.asyncio
    async def test_forecast_parsed(self, inference, memory, sql, sample_business):
        await sql.insert("businesses", sample_business)
        inference.infer.return_value = '{"month_1": {"revenue": 1500}}'
        agent = FinanceAgent(inference, memory, sql=sql)

        result = await agent.run_forecast("user-1", "biz-1")

        assert result == {"forecast": {"month_1": {"revenue": 1500}}, "saved": True}
        rows = await sql.select("forecasts", {"business_id": "biz-1"})
        assert json.loads(rows[0]["forecast"]) == {"month_1": {"revenue": 1500}}
        assert rows[0]["period"] == "12_months"

        prompt = inference.infer.await_args.args[0]
        assert "Current Revenue: 1200.0" in prompt

    @pytest.mark.asyncio
    async def test_forecast_unparsed_and_overwritten(self, inference, memory, sql):
        agent = FinanceAgent(inference, memory, sql=sql)

        inference.infer.return_value = "first"
        await agent.run_forecast("user-1", "biz-1")
        inference.infer.return_value = "second"
        result = await agent.run_forecast("user-1", "biz-1")

        assert result["forecast"] == {"text": "second", "parsed": False}
        latest = await memory.read("finance:latest_forecast", "user-1")
        assert latest["forecast"] == {"text": "second", "parsed": False}
        assert len(await sql.select("forecasts")) == 2

    @pytest.mark.asyncio
    async def test_chat_includes_financial_history(self, inference, memory, sql, sample_business):
        await sql.insert("businesses", sample_business)
        await sql.insert("financial_data", {
            "id": "fd-1", "business_id": "biz-1", "user_id": "user-1", "revenue": 999, "month": "2026-01",
        })
        await sql.insert("financial_data", {
            "id": "fd-2", "business_id": "other", "user_id": "user-1", "revenue": 555, "month": "2026-01",
        })
        agent = FinanceAgent(inference, memory, sql=sql)

        await agent.chat("user-1", "Am I profitable?", "biz-1")

        system = _sent_messages(inference)[0]["content"]
        assert "999" in system
        assert "555" not in system
        assert "Revenue Model: subscription" in system


# ── Product ───────────────────────────────────────────────────────────

class TestProductAgent:

    @pytest.mark.asyncio
    async def test_create_prd(self, inference, memory, buckets):
        agent = ProductAgent(inference, memory, buckets=buckets)

        result = await agent.create_prd("user-1", "biz-1", "Team billing")

        assert result == {"prd": "generated text", "saved": True}
        assert "Feature: Team billing" in inference.infer.await_args.args[0]

        refs = await memory.read("product:prds", "user-1")
        assert re.fullmatch(r"prds/biz-1/\d+\.md", refs[0]["key"])
        assert await buckets.download("product-docs", refs[0]["key"]) == "generated text"

    @pytest.mark.asyncio
    async def test_chat_uses_product_context(self, inference, memory, buckets):
        await memory.write("product:context", "user-1", {"roadmap": "mobile app"})
        agent = ProductAgent(inference, memory, buckets=buckets)

        result = await agent.chat("user-1", "Next feature?", "biz-1")

        assert result["agent_id"] == "product"
        assert "mobile app" in _sent_messages(inference)[0]["content"]


# ── Sales ─────────────────────────────────────────────────────────────

class TestSalesAgent:

    @pytest.mark.asyncio
    async def test_outreach_message(self, inference, memory):
        agent = SalesAgent(inference, memory)
        prospect = {"name": "Ada", "company": "Acme", "role": "CTO"}

        result = await agent.generate_outreach_message("user-1", "biz-1", prospect)

        assert result == {"message": "generated text", "saved": True}
        prompt = inference.infer.await_args.args[0]
        assert "Name: Ada" in prompt and "Company: Acme" in prompt

        log = await memory.read("sales:outreach_messages", "user-1")
        assert log[0]["prospect_info"] == prospect
        assert log[0]["message"] == "generated text"

    @pytest.mark.asyncio
    async def test_chat_uses_both_contexts(self, inference, memory):
        await memory.write("sales:context", "user-1", {"pipeline": "12 leads"})
        await memory.write("business:context", "user-1", {"industry": "Retail"})
        agent = SalesAgent(inference, memory)

        result = await agent.chat("user-1", "Script?", "biz-1")

        system = _sent_messages(inference)[0]["content"]
        assert result["agent_id"] == "sales"
        assert "12 leads" in system and "Retail" in system
