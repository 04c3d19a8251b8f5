"""
Onboarding API.

POST /api/onboarding: Create the user's business and initialize agents
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.auth import AuthenticatedUser
from ..core.dependencies import get_manager, get_memory, get_sql, get_user
from ..models.base import epoch_ms, iso_now, new_uuid
from ..orchestrator.manager import AgentManager
from ..services.memory import MemoryStore
from ..services.sql import SQLStore

logger = logging.getLogger(__name__)

onboarding_router = APIRouter(prefix="/onboarding", tags=["onboarding"])


class OnboardingRequest(BaseModel):
    business_type: str
    industry: Optional[str] = None
    stage: Optional[str] = None
    revenue_model: Optional[str] = None
    current_revenue: Optional[float] = None
    current_expenses: Optional[float] = None
    answers: dict = {}


class OnboardingResponse(BaseModel):
    success: bool
    business_id: str


@onboarding_router.post("", response_model=OnboardingResponse)
async def onboard(
    request: OnboardingRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
    sql: SQLStore = Depends(get_sql),
    memory: MemoryStore = Depends(get_memory),
):
    """Create the business record, enable all agents, seed business context."""
    business_id = new_uuid()
    await sql.insert("businesses", {
        "id": business_id,
        "user_id": user.user_id,
        "type": request.business_type,
        "industry": request.industry,
        "stage": request.stage,
        "revenue_model": request.revenue_model,
        "current_revenue": request.current_revenue,
        "current_expenses": request.current_expenses,
        "answers": json.dumps(request.answers),
        "created_at": iso_now(),
    })

    await manager.initialize_agents(user.user_id, business_id)

    await memory.write("business:context", user.user_id, {
        "business_id": business_id,
        "type": request.business_type,
        "industry": request.industry,
        "stage": request.stage,
        "answers": request.answers,
        "timestamp": epoch_ms(),
    })
    logger.info("Onboarded user=%s business=%s", user.user_id, business_id)

    return OnboardingResponse(success=True, business_id=business_id)
