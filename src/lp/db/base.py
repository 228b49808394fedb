"""Database connection and session management."""

import asyncio
import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from lp.config import get_settings

logger = logging.getLogger(__name__)

# Primary store: users, categories, plans, segments, tasks
Base = declarative_base()
# Secondary store: aggregated resource catalog, read-only from here
ResourceBase = declarative_base()

# Process-wide engines and sessionmakers, created once on first use
engine: Optional[AsyncEngine] = None
resource_engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None
ResourceSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None

_init_lock = asyncio.Lock()


def _create_engine(url: str) -> AsyncEngine:
    settings = get_settings()

    engine_args: Dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.debug,
    }

    # SQLite (used in tests) doesn't support pool_size/max_overflow
    if not url.startswith("sqlite"):
        engine_args["pool_size"] = settings.db_pool_size
        engine_args["max_overflow"] = settings.db_max_overflow

    return create_async_engine(url, **engine_args)


async def init_db() -> None:
    """Initialize database connections; safe to call more than once."""
    global engine, resource_engine, AsyncSessionLocal, ResourceSessionLocal

    async with _init_lock:
        if engine is not None:
            return

        import lp.models  # noqa: F401

        settings = get_settings()
        primary = _create_engine(settings.db_url)
        if settings.resource_store_url == settings.db_url:
            secondary = primary
        else:
            secondary = _create_engine(settings.resource_store_url)

        # For in-memory SQLite used in tests, create tables automatically
        if settings.db_url.startswith("sqlite"):
            async with primary.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        if settings.resource_store_url.startswith("sqlite"):
            async with secondary.begin() as conn:
                await conn.run_sync(ResourceBase.metadata.create_all)

        engine = primary
        resource_engine = secondary
        AsyncSessionLocal = async_sessionmaker(
            primary, class_=AsyncSession, expire_on_commit=False
        )
        ResourceSessionLocal = async_sessionmaker(
            secondary, class_=AsyncSession, expire_on_commit=False
        )
        logger.info("Database connections initialized")


async def close_db() -> None:
    """Close database connections."""
    global engine, resource_engine, AsyncSessionLocal, ResourceSessionLocal

    async with _init_lock:
        if resource_engine is not None and resource_engine is not engine:
            await resource_engine.dispose()
        if engine is not None:
            await engine.dispose()
        engine = None
        resource_engine = None
        AsyncSessionLocal = None
        ResourceSessionLocal = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get primary database session for dependency injection."""
    if AsyncSessionLocal is None:
        await init_db()

    assert AsyncSessionLocal is not None

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_resource_db() -> AsyncGenerator[AsyncSession, None]:
    """Get resource catalog session for dependency injection."""
    if ResourceSessionLocal is None:
        await init_db()

    assert ResourceSessionLocal is not None

    async with ResourceSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
