"""
Movie Blog API - Database Engine Management
============================================

What:  Builds the async SQLAlchemy engine (the process-wide connection pool)
       and holds the declarative Base for the ORM models.
How:   `create_engine_from_settings()` is called once by the application
       lifespan. The resulting engine is stored on `app.state.engine` and
       handed to the repository through FastAPI dependencies, so tests can
       substitute their own engine.
When:  Engine is created at startup and disposed at shutdown.

Connection Pooling Strategy:
    pool_size=10:      Fixed capacity of concurrently open connections
    max_overflow=0:    No connections beyond pool_size
    pool_timeout=30:   Seconds a request waits in the checkout queue
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from starlette.requests import Request

from movie_blog.config import Settings, settings as default_settings
from movie_blog.exceptions import StoreError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Its metadata is the schema source for Alembic and for the test fixtures
    that build an in-memory database.
    """
    pass


def _pool_options(url: URL, config: Settings) -> Dict[str, Any]:
    """Queue-pool sizing for server databases; SQLite keeps its default pool."""
    if url.get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
        "pool_timeout": config.db_pool_timeout,
        "pool_pre_ping": config.db_pool_pre_ping,
        "pool_recycle": 3600,
    }


def create_engine_from_settings(config: Optional[Settings] = None) -> AsyncEngine:
    """
    Create the application's async engine and its bounded connection pool.

    No connection is opened here; the pool fills lazily on first checkout.

    Args:
        config: Settings to read from (defaults to the module-level settings)

    Returns:
        A configured AsyncEngine owned by the caller, who must dispose it.
    """
    config = config or default_settings
    url = config.sqlalchemy_url
    engine = create_async_engine(
        url,
        # Echo SQL only in DEBUG mode
        echo=config.log_level == "DEBUG",
        **_pool_options(url, config),
    )
    logger.info(
        "Database engine created for %s (pool_size=%d)",
        url.render_as_string(hide_password=True),
        config.db_pool_size,
    )
    return engine


# ── Engine Dependency ─────────────────────────────────────────────────────
def get_engine(request: Request) -> AsyncEngine:
    """
    FastAPI dependency returning the engine owned by the running application.

    Raises:
        StoreError: the application has no engine (startup did not run)
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise StoreError(
            message="The database is not available. Please try again later.",
            operation="connect",
        )
    return engine


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
    logger.info("Database engine disposed")
