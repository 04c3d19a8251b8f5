"""
Dashboard API.

GET /api/dashboard: Business summary with recent agent output
"""

import logging

from fastapi import APIRouter, Depends

from ..core.auth import AuthenticatedUser
from ..core.dependencies import get_memory, get_sql, get_user
from ..services.memory import MemoryStore
from ..services.sql import SQLStore

logger = logging.getLogger(__name__)

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


async def _read_log(memory: MemoryStore, key: str, user_id: str) -> list:
    value = await memory.read(key, user_id)
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


@dashboard_router.get("")
async def get_dashboard(
    user: AuthenticatedUser = Depends(get_user),
    sql: SQLStore = Depends(get_sql),
    memory: MemoryStore = Depends(get_memory),
):
    """First business plus the last 3 plans, last 5 assets and the latest forecast."""
    businesses = await sql.select("businesses", {"user_id": user.user_id})
    if not businesses:
        return {"business": None, "summary": None}
    business = businesses[0]

    recent_plans = await _read_log(memory, "ceo:weekly_plans", user.user_id)
    recent_assets = await _read_log(memory, "marketing:assets", user.user_id)
    latest_forecast = await memory.read("finance:latest_forecast", user.user_id)

    return {
        "business": business,
        "summary": {
            "business": business,
            "recent_plans": recent_plans[-3:],
            "recent_assets": recent_assets[-5:],
            "latest_forecast": latest_forecast,
        },
    }
