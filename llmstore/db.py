"""SQLAlchemy 2.x async database setup.

The :class:`Database` handle owns the engine (and its connection pool) and
the session factory. One instance is created per application in the
lifespan hook and stored on ``app.state``; nothing here is a module-level
singleton.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import DatabaseSettings
from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Engine plus session factory for one store."""

    def __init__(self, config: DatabaseSettings) -> None:
        engine_kwargs: dict = {"echo": config.echo, "pool_pre_ping": True}
        if not config.is_sqlite:
            engine_kwargs.update(pool_size=config.pool_size, max_overflow=config.max_overflow)

        self.engine: AsyncEngine = create_async_engine(config.dsn, **engine_kwargs)
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    def session(self) -> AsyncSession:
        """Open a new session; use it as an async context manager."""
        return self.session_maker()

    async def ping(self) -> None:
        """Round-trip a trivial query to prove the store is reachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        logger.info(f"Schema ready: {', '.join(Base.metadata.tables.keys())}")

    async def initialize(self) -> None:
        """Connectivity check plus schema creation, run at startup."""
        await self.ping()
        await self.create_schema()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI-friendly async session dependency.

    Usage:
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """

    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
