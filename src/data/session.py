"""
Async database client for SQLAlchemy.

Provides:
- The Database object owning the async engine and session factory
- Lifecycle management (init, close)
- A transactional session scope used by the repository
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.data.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Persistence client created once at startup and handed to every
    component that needs database access.
    """

    def __init__(self, url: str | URL, **engine_kwargs: Any):
        """
        Args:
            url: SQLAlchemy async connection URL
            **engine_kwargs: Passed through to create_async_engine
        """
        self.url = make_url(url)
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """
        Raises:
            RuntimeError: If engine not initialized (call init first)
        """
        if self._engine is None:
            raise RuntimeError("Database engine not initialized. Call init() first.")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("Session factory not initialized. Call init() first.")
        return self._session_factory

    async def init(self, create_tables: bool = True) -> None:
        """
        Create the engine and session factory, then create missing tables.

        Called once at application startup (FastAPI lifespan).
        """
        logger.info(f"Initializing database connection: {self.url.render_as_string(hide_password=True)}")

        self._engine = create_async_engine(self.url, **self._engine_kwargs)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if create_tables:
            await self.create_tables()

        logger.info("Database initialized successfully")

    async def close(self) -> None:
        """Dispose the engine. Safe to call when not initialized."""
        if self._engine is not None:
            logger.info("Closing database connection")
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection closed")

    async def create_tables(self) -> None:
        """Create all tables defined in Base.metadata that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("Tables ensured")

    @asynccontextmanager
    async def session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for a single unit of work.

        Usage:
            async with db.session_scope() as session:
                await session.execute(...)

        Auto-commits on success, rolls back on exception.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
