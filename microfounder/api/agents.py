"""
Agents API.

GET  /api/agents                : Agent catalog
POST /api/agents/{agent_id}/chat: Chat with one agent
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .errors import to_http
from ..core.auth import AuthenticatedUser
from ..core.dependencies import get_manager, get_user
from ..core.errors import MicroFounderError
from ..core.guardrails import check_input, check_output
from ..orchestrator.manager import AgentManager

logger = logging.getLogger(__name__)

agents_router = APIRouter(prefix="/agents", tags=["agents"])


class AgentInfo(BaseModel):
    id: str
    name: str
    description: str
    status: str = "active"


class AgentList(BaseModel):
    agents: list[AgentInfo]


class ChatRequest(BaseModel):
    message: str
    business_id: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
    agent_id: str


@agents_router.get("", response_model=AgentList)
async def list_agents(
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    agents = await manager.get_agents(user.user_id)
    return AgentList(agents=[AgentInfo(**a) for a in agents])


@agents_router.post("/{agent_id}/chat", response_model=ChatResponse)
async def chat(
    agent_id: str,
    request: ChatRequest,
    user: AuthenticatedUser = Depends(get_user),
    manager: AgentManager = Depends(get_manager),
):
    """Send a message to one agent. business_id defaults to the user's first business."""
    guard = check_input(request.message, user.user_id)
    if not guard.allowed:
        raise HTTPException(status_code=400, detail=guard.reason)

    try:
        result = await manager.chat_with_agent(
            user.user_id, agent_id, request.message, request.business_id,
        )
    except (MicroFounderError, ValueError) as e:
        raise to_http(e)

    output = check_output(result["response"])
    return ChatResponse(
        response=output.modified_text or result["response"],
        agent_id=result["agent_id"],
    )
