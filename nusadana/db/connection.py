"""Database connection and session management for NusaDana.

Provides async SQLAlchemy session management with connection pooling. A
``Database`` is constructed explicitly (at application startup or by the CLI)
and handed to whatever needs it; nothing here is a module-level singleton.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from nusadana.config import DBConfig
from nusadana.db.models import Base

logger = structlog.get_logger(__name__)


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(self, config: DBConfig):
        self.config = config

        # Build engine kwargs
        engine_kwargs: dict = {"echo": config.echo}

        # SQLite doesn't support connection pooling parameters
        if "sqlite" not in config.url.lower():
            engine_kwargs.update({
                "pool_size": config.pool_size,
                "max_overflow": config.pool_max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_pre_ping": True,  # Verify connections before using
                "pool_recycle": 3600,  # Recycle connections after 1 hour
            })

        self.engine: AsyncEngine = create_async_engine(config.url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session (context manager).

        Usage:
            async with db.session() as session:
                result = await session.execute(query)

        Commits when the block exits cleanly, rolls back on any exception.
        """
        session = self.session_factory()

        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self, drop: bool = False) -> None:
        """Create all tables.

        Note: For production, manage the schema in Supabase migrations.
        This is a convenience for development and tests.
        """
        async with self.engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_ready", drop=drop)

    async def dispose(self) -> None:
        """Close database engine and dispose connections.

        Call this on application shutdown.
        """
        await self.engine.dispose()
