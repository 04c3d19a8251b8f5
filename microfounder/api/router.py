"""
Main API router. Mounts all sub-routers.
"""

from fastapi import APIRouter, Depends

from ..core.dependencies import get_user

router = APIRouter()


# ── Health (no auth) ─────────────────────────────────────────────────

@router.get("/health")
async def health():
    return {"status": "ok", "service": "microfounder"}


@router.get("/health/stores")
async def store_health():
    """Per-adapter degradation records (fallback counts, last error)."""
    from ..services.buckets import get_bucket_store
    from ..services.memory import get_memory_store
    from ..services.sql import get_sql_store

    stores = [get_memory_store(), get_sql_store(), get_bucket_store()]
    return {"stores": [s.health.to_dict() for s in stores]}


# ── Auth config (no auth) ───────────────────────────────────────────

@router.get("/auth/config")
async def auth_config():
    from ..core.config import get_settings
    from ..core.flags import get_flags

    flags = get_flags()
    if not flags.use_auth:
        return {"auth_enabled": False, "message": "Dev mode, no auth required"}

    settings = get_settings()
    return {
        "auth_enabled": True,
        "domain": settings.auth_domain,
        "audience": settings.auth_audience,
    }


# ── API routes (auth required) ──────────────────────────────────────

from .agents import agents_router
from .dashboard import dashboard_router
from .onboarding import onboarding_router
from .workflows import workflows_router
from .workspace import workspace_router

router.include_router(onboarding_router, prefix="/api", dependencies=[Depends(get_user)])
router.include_router(agents_router, prefix="/api", dependencies=[Depends(get_user)])
router.include_router(workflows_router, prefix="/api", dependencies=[Depends(get_user)])
router.include_router(dashboard_router, prefix="/api", dependencies=[Depends(get_user)])
router.include_router(workspace_router, prefix="/api", dependencies=[Depends(get_user)])
