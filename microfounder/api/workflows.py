"""
Workflows API. One generation workflow per agent.

POST /api/workflows/create-weekly-plan        : CEO
POST /api/workflows/generate-marketing-assets : Marketing
POST /api/workflows/run-financial-forecast    : Finance
POST /api/workflows/create-prd                : Product
POST /api/workflows/generate-outreach-message : Sales

business_id is optional everywhere; it defaults to the user's first business.
"""

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .errors import to_http
from ..core.auth import AuthenticatedUser
from ..core.dependencies import get_manager, get_user
from ..core.errors import MicroFounderError
from ..core.guardrails import check_input
from ..orchestrator.manager import AgentManager

logger = logging.getLogger(__name__)

workflows_router = APIRouter(prefix="/workflows", tags=["workflows"])


class WorkflowRequest(BaseModel):
    business_id: Optional[str] = None


class MarketingAssetsRequest(WorkflowRequest):
    asset_type: Literal["ad_copy", "landing_page", "email_campaign"]


class PRDRequest(WorkflowRequest):
    feature: str


class ProspectInfo(BaseModel):
    name: str
    company: str
    role: str


class OutreachRequest(WorkflowRequest):
    prospect_info: ProspectInfo


class WeeklyPlanResponse(BaseModel):
    plan: str
    saved: bool


class MarketingAsset(BaseModel):
    type: str
    key: str
    content: str
    format: str


class MarketingAssetsResponse(BaseModel):
    assets: list[MarketingAsset]
    saved: bool


class ForecastResponse(BaseModel):
    forecast: Any
    saved: bool


class PRDResponse(BaseModel):
    prd: str
    saved: bool


class OutreachResponse(BaseModel):
    message: str
    saved: bool


async def _run(manager: AgentManager, user: AuthenticatedUser, business_id, workflow, *args):
    try:
        resolved = await manager.resolve_business_id(user.user_id, business_id)
        return await workflow(user.user_id, resolved, *args)
    except (MicroFounderError, ValueError) as e:
        raise to_http(e)


@workflows_router.post("/create-weekly-plan", response_model=WeeklyPlanResponse)
async def create_weekly_plan(
    request: WorkflowRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    return await _run(manager, user, request.business_id, manager.create_weekly_plan)


@workflows_router.post("/generate-marketing-assets", response_model=MarketingAssetsResponse)
async def generate_marketing_assets(
    request: MarketingAssetsRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    return await _run(
        manager, user, request.business_id,
        manager.generate_marketing_assets, request.asset_type,
    )


@workflows_router.post("/run-financial-forecast", response_model=ForecastResponse)
async def run_financial_forecast(
    request: WorkflowRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    return await _run(manager, user, request.business_id, manager.run_financial_forecast)


@workflows_router.post("/create-prd", response_model=PRDResponse)
async def create_prd(
    request: PRDRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    guard = check_input(request.feature, user.user_id, field="Feature")
    if not guard.allowed:
        raise HTTPException(status_code=400, detail=guard.reason)
    return await _run(manager, user, request.business_id, manager.create_prd, request.feature)


@workflows_router.post("/generate-outreach-message", response_model=OutreachResponse)
async def generate_outreach_message(
    request: OutreachRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    return await _run(
        manager, user, request.business_id,
        manager.generate_outreach_message, request.prospect_info.model_dump(),
    )
