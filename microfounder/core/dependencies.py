"""
FastAPI dependencies. Injected into route handlers.
"""

from fastapi import Header, HTTPException, status

from .auth import AuthenticatedUser, get_current_user
from ..orchestrator.manager import AgentManager, get_agent_manager
from ..services.memory import MemoryStore, get_memory_store
from ..services.sql import SQLStore, get_sql_store


async def get_user(
    authorization: str = Header(default=""),
) -> AuthenticatedUser:
    """
    Resolve authenticated user from Authorization header.
    Returns dev user if FF_USE_AUTH=false.
    """
    try:
        return await get_current_user(authorization)
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_manager() -> AgentManager:
    """The process-wide agent manager."""
    return get_agent_manager()


def get_sql() -> SQLStore:
    return get_sql_store()


def get_memory() -> MemoryStore:
    return get_memory_store()
