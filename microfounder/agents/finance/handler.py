"""
Finance agent: forecasting, pricing, break-even analysis.

Forecasts are parsed as JSON when the model cooperates and wrapped as
{"text", "parsed": False} when it doesn't. Never raises on bad model output.
"""

import json
import logging

from ...orchestrator.base_agent import AgentKind, BaseAgent, to_json
from ...models.base import epoch_ms, iso_now, new_uuid

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "finance:conversations"
LATEST_FORECAST_KEY = "finance:latest_forecast"

SYSTEM_PROMPT = """You are a Finance Agent helping with financial planning and analysis.
Your expertise includes:
- Financial forecasting
- Pricing strategy
- Break-even analysis
- Unit economics
- Cash flow management

Business Context:
- Type: {type}
- Revenue Model: {revenue_model}

Financial History:
{history}

Be precise, analytical, and provide actionable financial insights."""

FORECAST_PROMPT = """Create a 12-month financial forecast for this business:

Business Type: {type}
Revenue Model: {revenue_model}
Current Revenue: {current_revenue}
Current Expenses: {current_expenses}

Historical Data:
{history}

Create a detailed forecast including:
1. Monthly revenue projections
2. Monthly expense projections
3. Cash flow forecast
4. Break-even analysis
5. Key assumptions
6. Risk factors

Format as structured JSON with monthly breakdowns."""


def parse_forecast(text: str):
    """JSON forecast, or {"text": raw, "parsed": False}."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        logger.info("Forecast is not JSON, keeping raw text (%d chars)", len(text or ""))
        return {"text": text, "parsed": False}


class FinanceAgent(BaseAgent):
    kind = AgentKind.FINANCE
    display_name = "Finance Agent"
    description = "Forecasting, pricing, break-even analysis"
    log_key = CONVERSATIONS_KEY

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        business = await self._load_business(business_id)
        history = await self.sql.select("financial_data", {"business_id": business_id})

        system_prompt = SYSTEM_PROMPT.format(
            type=business.get("type") or "Unknown",
            revenue_model=business.get("revenue_model") or "Unknown",
            history=to_json(history[-10:]),
        )
        return await self._converse(user_id, message, system_prompt)

    async def run_forecast(self, user_id: str, business_id: str) -> dict:
        business = await self._load_business(business_id)
        history = await self.sql.select("financial_data", {"business_id": business_id})

        prompt = FORECAST_PROMPT.format(
            type=business.get("type") or "Unknown",
            revenue_model=business.get("revenue_model") or "Unknown",
            current_revenue=business.get("current_revenue") or 0,
            current_expenses=business.get("current_expenses") or 0,
            history=to_json(history[-12:]),
        )
        forecast = parse_forecast(await self.inference.infer(prompt))

        await self.sql.insert("forecasts", {
            "id": new_uuid(),
            "user_id": user_id,
            "business_id": business_id,
            "forecast": json.dumps(forecast),
            "period": "12_months",
            "created_at": iso_now(),
        })
        # Latest only: overwrite, not append
        await self.memory.write(LATEST_FORECAST_KEY, user_id, {
            "business_id": business_id,
            "forecast": forecast,
            "timestamp": epoch_ms(),
        })

        return {"forecast": forecast, "saved": True}
