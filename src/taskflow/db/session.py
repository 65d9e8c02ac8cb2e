"""Database handle owning the async engine and session factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from .. import models  # noqa: F401  registers tables on SQLModel.metadata
from ..core.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Explicitly constructed storage handle shared by request-scoped sessions.

    The handle is created once per application in ``create_app`` and disposed on
    shutdown. SQLite URLs (used by the test suite) get a thread-agnostic
    connection, a static pool for in-memory databases, and enforced foreign
    keys so ``ON DELETE CASCADE`` behaves like it does on PostgreSQL.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._url = url
        engine_kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        parsed = make_url(url)
        backend = parsed.get_backend_name()
        if backend == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool
        self._engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if backend == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings."""
        return cls(settings.database_url, echo=settings.db_echo)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an ``AsyncSession`` that is closed when the block exits.

        Closing releases the connection (discarding any uncommitted work)
        without expiring loaded instances, so objects returned from the block
        stay readable.
        """
        async with self._session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """Create all tables (local development and tests)."""
        async with self._engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        """Release pooled connections."""
        logger.info("Disposing database engine")
        await self._engine.dispose()


__all__ = ["Database"]
