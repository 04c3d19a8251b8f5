"""
Workspace API. Read-only views over the user's stored data.

GET /api/workspace/sql   : List tables, or the user's rows in one table
GET /api/workspace/memory: The user's memory keys and values
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..core.auth import AuthenticatedUser
from ..core.dependencies import get_memory, get_sql, get_user
from ..models import TABLES
from ..services.memory import MemoryStore
from ..services.sql import SQLStore

logger = logging.getLogger(__name__)

workspace_router = APIRouter(prefix="/workspace", tags=["workspace"])


@workspace_router.get("/sql")
async def workspace_sql(
    table: Optional[str] = None,
    user: AuthenticatedUser = Depends(get_user),
    sql: SQLStore = Depends(get_sql),
):
    if not table:
        return {"tables": list(TABLES)}
    if table not in TABLES:
        raise HTTPException(status_code=404, detail=f"Unknown table: {table}")

    data = await sql.select(table, {"user_id": user.user_id})
    return {"table": table, "data": data}


@workspace_router.get("/memory")
async def workspace_memory(
    prefix: Optional[str] = None,
    user: AuthenticatedUser = Depends(get_user),
    memory: MemoryStore = Depends(get_memory),
):
    keys = await memory.list(user.user_id, prefix)
    data = {}
    for key in keys:
        data[key] = await memory.read(key, user.user_id)
    return {"keys": keys, "data": data}
