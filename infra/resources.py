"""Infrastructure resources: the relational store.

This module is part of the infra layer and must not import from application features.
"""
import asyncio
import logging

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

logger = logging.getLogger("chat.infra.database")


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(
        self,
        database_url: str,
        connect_retries: int = 3,
        backoff_seconds: float = 1.0,
    ):
        self.database_url = database_url
        self.connect_retries = max(1, connect_retries)
        self.backoff_seconds = backoff_seconds
        self.engine = None
        self.session_factory = None

    async def init(self):
        """Initialize database engine and session factory."""
        self.engine = create_async_engine(
            self.database_url,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    async def connect(self) -> None:
        """Verify connectivity, retrying with a linear backoff.

        Attempt ``n`` that fails waits ``backoff_seconds * n`` before the next one;
        the last failure is re-raised.
        """
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        attempt = 0
        while True:
            try:
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                return
            except Exception as e:
                attempt += 1
                logger.error(f"Database connect attempt {attempt} failed: {e}")
                if attempt >= self.connect_retries:
                    raise
                await asyncio.sleep(self.backoff_seconds * attempt)

    async def create_tables(self, metadata: MetaData) -> None:
        """Create any missing tables for the given metadata."""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
