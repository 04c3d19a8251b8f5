"""
FastAPI application factory.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import get_settings
from .core.database import init_db, close_db
from .core.redis import close_redis
from .api.router import router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="MicroFounder OS",
        description="AI business agents for solo founders",
        version="1.0.0",
        docs_url="/docs" if settings.env == "development" else None,
        redoc_url="/redoc" if settings.env == "development" else None,
    )

    # ── CORS ─────────────────────────────────────────────────────
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Startup ──────────────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup():
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        logger.info("Starting MicroFounder OS (env=%s)", settings.env)

        # Build stores + agents
        from .orchestrator.manager import get_agent_manager
        manager = get_agent_manager()

        # Create tables through the relational store
        await init_db(manager.sql)

        # Log feature flag state
        from .core.flags import get_flags
        flags = get_flags()
        logger.info(
            "Flags: auth=%s database=%s redis=%s s3=%s",
            flags.use_auth, flags.use_database, flags.use_redis, flags.use_s3,
        )
        logger.info("MicroFounder OS is ready")

    # ── Shutdown ─────────────────────────────────────────────────
    @app.on_event("shutdown")
    async def on_shutdown():
        from .services.inference import close_client
        await close_client()
        await close_db()
        await close_redis()
        logger.info("MicroFounder OS shut down")

    # ── Routes ───────────────────────────────────────────────────
    app.include_router(router)

    return app
