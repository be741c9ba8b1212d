"""Async database engine and session management."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class Database:
    """Owns the async engine and hands out sessions."""

    def __init__(self, url: str, echo: bool = False):
        """Create the engine.

        Args:
            url: SQLAlchemy async database URL
            echo: Log every SQL statement
        """
        self.url = url

        engine_kwargs = {}
        if url.startswith("sqlite") and ":memory:" in url:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool

        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            _enable_sqlite_savepoints(self.engine.sync_engine)

        self._sessionmaker = async_sessionmaker(
            self.engine, expire_on_commit=False, autoflush=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a new session; it is closed on exit."""
        async with self._sessionmaker() as session:
            yield session

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        from . import tables  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        from . import tables  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()


def _enable_sqlite_savepoints(sync_engine) -> None:
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; emit it ourselves.
    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Global database instance
_db: Optional[Database] = None


def init_db(url: str, echo: bool = False) -> Database:
    """Initialize the global database.

    Args:
        url: SQLAlchemy async database URL
        echo: Log every SQL statement

    Returns:
        Database instance
    """
    global _db
    _db = Database(url, echo=echo)
    logger.debug(f"Database initialized: {url}")
    return _db


def get_db() -> Database:
    """Get the global database instance.

    Raises:
        RuntimeError: If the database has not been initialized
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
