"""Async engine and session lifecycle for the device store."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from device_registry.core.config import Settings, get_settings
from device_registry.infrastructure.database.base import Base

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings) -> dict[str, Any]:
    database = settings.database
    options: dict[str, Any] = {"echo": database.echo or settings.debug}
    # SQLite keeps its default pool; sizing only applies to server databases.
    if not settings.database_url.startswith("sqlite"):
        if database.pool_size is not None:
            options["pool_size"] = database.pool_size
        if database.max_overflow is not None:
            options["max_overflow"] = database.max_overflow
    return options


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Return the process-wide engine, creating it from ``settings`` on first use."""
    global _engine, AsyncSessionFactory
    if _engine is not None:
        return _engine

    settings = settings or get_settings()
    _engine = create_async_engine(settings.database_url, **_engine_options(settings))
    AsyncSessionFactory = async_sessionmaker(bind=_engine, expire_on_commit=False)
    logger.info("Database engine created for %s", _engine.url.render_as_string(hide_password=True))
    return _engine


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    engine, _engine, AsyncSessionFactory = _engine, None, None
    if engine is not None:
        await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on any error."""
    get_engine()
    assert AsyncSessionFactory is not None

    async with AsyncSessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        else:
            await session.commit()


async def init_db(settings: Settings | None = None) -> None:
    """Create missing tables; Alembic owns schema changes on existing databases."""
    from device_registry.db import models  # noqa: F401  registers the mappers

    async with get_engine(settings).begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
