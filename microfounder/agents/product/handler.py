"""
Product agent: PRDs, UX suggestions, product docs.
"""

import logging

from ...orchestrator.base_agent import AgentKind, BaseAgent, to_json
from ...models.base import epoch_ms, iso_now

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "product:conversations"
CONTEXT_KEY = "product:context"
PRDS_KEY = "product:prds"
BUCKET = "product-docs"

SYSTEM_PROMPT = """You are a Product Agent helping with product development and UX.
Your expertise includes:
- Product Requirements Documents (PRDs)
- UX/UI suggestions
- Feature prioritization
- User research insights
- Product strategy

Product Context:
{context}

Be user-focused, practical, and detail-oriented."""

PRD_PROMPT = """Create a comprehensive Product Requirements Document (PRD) for this feature:

Feature: {feature}

Product Context:
{context}

The PRD should include:
1. Executive Summary
2. Problem Statement
3. Goals & Success Metrics
4. User Stories
5. Functional Requirements
6. Non-functional Requirements
7. UX/UI Considerations
8. Technical Considerations
9. Timeline & Milestones
10. Open Questions

Format as a structured markdown document."""


class ProductAgent(BaseAgent):
    kind = AgentKind.PRODUCT
    display_name = "Product Agent"
    description = "PRDs, UX suggestions, product docs"
    log_key = CONVERSATIONS_KEY

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        context = await self._read_context(CONTEXT_KEY, user_id)
        system_prompt = SYSTEM_PROMPT.format(context=to_json(context))
        return await self._converse(user_id, message, system_prompt)

    async def create_prd(self, user_id: str, business_id: str, feature: str) -> dict:
        context = await self._read_context(CONTEXT_KEY, user_id)
        prd = await self.inference.infer(PRD_PROMPT.format(feature=feature, context=to_json(context)))

        key = f"prds/{business_id}/{epoch_ms()}.md"
        await self.buckets.upload(BUCKET, key, prd, {
            "type": "prd",
            "feature": feature,
            "business_id": business_id,
            "user_id": user_id,
            "created_at": iso_now(),
        })
        await self.memory.append(PRDS_KEY, user_id, {
            "feature": feature,
            "key": key,
            "business_id": business_id,
            "timestamp": epoch_ms(),
        })

        return {"prd": prd, "saved": True}
