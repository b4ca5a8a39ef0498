"""Async SQLAlchemy engine for the opportunity store."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from arbwatch.db.models import Base

# Sync-driver URL prefixes and the async driver each is served by
_ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


def async_url(database_url: str) -> str:
    """Rewrite a plain SQLite/Postgres URL to use its async driver."""
    for prefix, replacement in _ASYNC_DRIVERS.items():
        if database_url.startswith(prefix):
            return replacement + database_url[len(prefix):]
    return database_url


class Database:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, database_url: str) -> None:
        """Initialize database connection.

        Args:
            database_url: SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///./opps.db``
        """
        if not database_url:
            raise ValueError("database_url must not be empty")

        self.url = async_url(database_url)

        if self.url.startswith("sqlite"):
            # One shared connection, or every session would see its own :memory: database
            pool_kwargs = {"poolclass": StaticPool} if ":memory:" in self.url else {}
        else:
            pool_kwargs = {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}

        self._engine: AsyncEngine = create_async_engine(
            self.url,
            echo=False,  # Set to True for SQL logging
            **pool_kwargs,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One transaction: committed on exit, rolled back if the block raises."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose of the connection pool."""
        await self._engine.dispose()
