"""
Sales agent: outreach messages and sales scripts.

Uses memory only. Outreach messages are logged in full, with the prospect.
"""

import logging

from ...orchestrator.base_agent import AgentKind, BaseAgent, to_json
from ...models.base import epoch_ms

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "sales:conversations"
CONTEXT_KEY = "sales:context"
BUSINESS_CONTEXT_KEY = "business:context"
OUTREACH_KEY = "sales:outreach_messages"

SYSTEM_PROMPT = """You are a Sales Agent helping with sales outreach and scripts.
Your expertise includes:
- Cold outreach messages
- Email sequences
- Sales scripts
- Objection handling
- Closing techniques

Business Context:
{business}

Sales Context:
{sales}

Be persuasive, personalized, and conversion-focused."""

OUTREACH_PROMPT = """Create a personalized cold outreach message for:

Prospect:
- Name: {name}
- Company: {company}
- Role: {role}

Business Context:
{business}

Create a compelling outreach message that:
1. Is personalized and relevant
2. Clearly communicates value proposition
3. Includes a clear call-to-action
4. Is concise (under 150 words)
5. Builds rapport

Format as a professional email."""


class SalesAgent(BaseAgent):
    kind = AgentKind.SALES
    display_name = "Sales Agent"
    description = "Outreach messages and sales scripts"
    log_key = CONVERSATIONS_KEY

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        sales = await self._read_context(CONTEXT_KEY, user_id)
        business = await self._read_context(BUSINESS_CONTEXT_KEY, user_id)

        system_prompt = SYSTEM_PROMPT.format(business=to_json(business), sales=to_json(sales))
        return await self._converse(user_id, message, system_prompt)

    async def generate_outreach_message(
        self, user_id: str, business_id: str, prospect_info: dict
    ) -> dict:
        business = await self._read_context(BUSINESS_CONTEXT_KEY, user_id)

        prompt = OUTREACH_PROMPT.format(
            name=prospect_info.get("name", ""),
            company=prospect_info.get("company", ""),
            role=prospect_info.get("role", ""),
            business=to_json(business),
        )
        message = await self.inference.infer(prompt)

        await self.memory.append(OUTREACH_KEY, user_id, {
            "prospect_info": prospect_info,
            "message": message,
            "business_id": business_id,
            "timestamp": epoch_ms(),
        })

        return {"message": message, "saved": True}
