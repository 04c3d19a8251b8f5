"""
CEO agent: strategic guidance and weekly plans.

Context: the business row plus the last five turns of `ceo:recent`.
Weekly plans go to the `ceo:weekly_plans` memory log and the
`weekly_plans` table.
"""

import logging

from ...orchestrator.base_agent import AgentKind, BaseAgent, to_json
from ...models.base import epoch_ms, iso_now, new_uuid, today

logger = logging.getLogger(__name__)

RECENT_KEY = "ceo:recent"
PLANS_KEY = "ceo:weekly_plans"
HISTORY_WINDOW = 5

SYSTEM_PROMPT = """You are a CEO Agent helping a solo founder or tiny team.
Your role is to provide strategic guidance, create weekly plans, and help with high-level decision making.

Business Context:
- Type: {type}
- Industry: {industry}
- Stage: {stage}

Recent Context:
{recent}

Be concise, strategic, and actionable."""

WEEKLY_PLAN_PROMPT = """Create a comprehensive weekly plan for this business:

Business Type: {type}
Industry: {industry}
Stage: {stage}

Previous Plans Context:
{previous}

Create a structured weekly plan with:
1. Strategic goals for the week
2. Key priorities (3-5 items)
3. Metrics to track
4. Risks and mitigation
5. Resource needs

Format as a clear, actionable plan."""


def _profile(business: dict) -> dict:
    return {
        "type": business.get("type") or "Unknown",
        "industry": business.get("industry") or "Unknown",
        "stage": business.get("stage") or "Early",
    }


class CEOAgent(BaseAgent):
    kind = AgentKind.CEO
    display_name = "CEO Agent"
    description = "Strategic planning and weekly plans"
    log_key = RECENT_KEY

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        business = await self._load_business(business_id)
        recent = (await self._read_log(RECENT_KEY, user_id))[-HISTORY_WINDOW:]

        system_prompt = SYSTEM_PROMPT.format(recent=to_json(recent), **_profile(business))
        return await self._converse(user_id, message, system_prompt, history=recent)

    async def create_weekly_plan(self, user_id: str, business_id: str) -> dict:
        business = await self._load_business(business_id)
        previous = (await self._read_log(PLANS_KEY, user_id))[-2:]

        prompt = WEEKLY_PLAN_PROMPT.format(previous=to_json(previous), **_profile(business))
        plan = await self.inference.infer(prompt)

        week = today()
        await self.memory.append(PLANS_KEY, user_id, {
            "business_id": business_id,
            "plan": plan,
            "week": week,
            "timestamp": epoch_ms(),
        })
        await self.sql.insert("weekly_plans", {
            "id": new_uuid(),
            "user_id": user_id,
            "business_id": business_id,
            "plan": plan,
            "week": week,
            "created_at": iso_now(),
        })
        logger.info("Weekly plan saved for business=%s week=%s", business_id, week)

        return {"plan": plan, "saved": True}
