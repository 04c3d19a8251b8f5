"""
Marketing agent: ad copy, landing pages, email campaigns.

Generated assets are uploaded raw to the `marketing-assets` bucket under
`{asset_type}/{business_id}/{epoch_ms}.{format}`; only a reference goes
to memory.
"""

import logging

from ...orchestrator.base_agent import AgentKind, BaseAgent, to_json
from ...models.base import epoch_ms, iso_now

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "marketing:conversations"
ASSETS_KEY = "marketing:assets"
BUSINESS_CONTEXT_KEY = "business:context"
BUCKET = "marketing-assets"

SYSTEM_PROMPT = """You are a Marketing Agent helping create marketing assets and campaigns.
Your expertise includes:
- Ad copywriting
- Landing page design and copy
- Email campaign creation
- Marketing strategy

Business Context:
{context}

Be creative, conversion-focused, and data-driven."""

AD_COPY_PROMPT = """Create compelling ad copy for this business:
{context}

Create 3 variations of ad copy:
1. Short form (25-30 characters)
2. Medium form (90-125 characters)
3. Long form (200-300 characters)

Include headlines, descriptions, and CTAs."""

LANDING_PAGE_PROMPT = """Create a complete landing page for this business:
{context}

Include:
- Hero section with headline and subheadline
- Value propositions (3-5 points)
- Social proof section
- CTA sections
- FAQ section (5-7 questions)

Format as structured HTML with inline CSS."""

EMAIL_CAMPAIGN_PROMPT = """Create an email campaign sequence (3 emails) for this business:
{context}

Create:
1. Welcome email
2. Educational email
3. Conversion email

Each email should have:
- Subject line
- Preheader text
- Body content
- CTA"""

# asset_type → (prompt template, output format)
ASSET_TEMPLATES = {
    "ad_copy": (AD_COPY_PROMPT, "json"),
    "landing_page": (LANDING_PAGE_PROMPT, "html"),
    "email_campaign": (EMAIL_CAMPAIGN_PROMPT, "json"),
}


class MarketingAgent(BaseAgent):
    kind = AgentKind.MARKETING
    display_name = "Marketing Agent"
    description = "Ad copy, landing pages, email campaigns"
    log_key = CONVERSATIONS_KEY

    async def chat(self, user_id: str, message: str, business_id: str) -> dict:
        context = await self._read_context(BUSINESS_CONTEXT_KEY, user_id)
        system_prompt = SYSTEM_PROMPT.format(context=to_json(context))
        return await self._converse(user_id, message, system_prompt)

    async def generate_assets(self, user_id: str, business_id: str, asset_type: str) -> dict:
        if asset_type not in ASSET_TEMPLATES:
            raise ValueError(
                f"Unsupported asset type: {asset_type}. "
                f"Use one of: {', '.join(ASSET_TEMPLATES)}"
            )
        template, asset_format = ASSET_TEMPLATES[asset_type]

        context = await self._read_context(BUSINESS_CONTEXT_KEY, user_id)
        content = await self.inference.infer(template.format(context=to_json(context)))

        key = f"{asset_type}/{business_id}/{epoch_ms()}.{asset_format}"
        await self.buckets.upload(BUCKET, key, content, {
            "asset_type": asset_type,
            "business_id": business_id,
            "user_id": user_id,
            "created_at": iso_now(),
        })
        await self.memory.append(ASSETS_KEY, user_id, {
            "asset_type": asset_type,
            "key": key,
            "business_id": business_id,
            "timestamp": epoch_ms(),
        })
        logger.info("Marketing asset stored: %s/%s", BUCKET, key)

        return {
            "assets": [
                {
                    "type": asset_type,
                    "key": key,
                    "content": content,
                    "format": asset_format,
                },
            ],
            "saved": True,
        }
