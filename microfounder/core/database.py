"""
Async SQLAlchemy engine. Remote backend of the relational store.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import get_settings

logger = logging.getLogger(__name__)


# Lazy global, initialized on first call to get_engine()
_engine: Optional[AsyncEngine] = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.database_url

        # Ensure we're using asyncpg driver for PostgreSQL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

        # SQLite doesn't support pool_size / max_overflow
        is_sqlite = "sqlite" in url
        kwargs = {
            "echo": settings.debug,
        }
        if not is_sqlite:
            kwargs["pool_size"] = 20
            kwargs["max_overflow"] = 10
            kwargs["pool_pre_ping"] = True

        _engine = create_async_engine(url, **kwargs)
        logger.info("Database engine created (%s)", "sqlite" if is_sqlite else "postgresql")
    return _engine


async def init_db(sql_store) -> None:
    """Create all tables through the relational store. Called on startup."""
    from ..models import TABLES

    for name, schema in TABLES.items():
        await sql_store.create_table(name, schema)
    logger.info("Database tables created/verified: %s", ", ".join(TABLES))


async def close_db() -> None:
    """Dispose engine. Called on shutdown."""
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")
