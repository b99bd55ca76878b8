"""Database utilities for the reminder service.

Engines are owned by a :class:`DatabaseRegistry` created together with the
application and kept on ``app.state``. Routes receive sessions through the
:func:`get_session` dependency, so nothing below holds a module-level engine.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)

from reminder_service.models import Base

logger = logging.getLogger(__name__)


class Database:
    """An async engine together with its session factory."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, future=True)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_all(self) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


class DatabaseRegistry:
    """Process-wide registry of connection pools keyed by database URL."""

    def __init__(self) -> None:
        self._databases: dict[str, Database] = {}

    def open(self, url: str) -> Database:
        """Return the database for ``url``, creating its pool on first use."""
        database = self._databases.get(url)
        if database is None:
            database = Database(url)
            self._databases[url] = database
            logger.info("Opened connection pool", extra={"database_url": _redact(url)})
        return database

    def get(self, url: str) -> Database:
        try:
            return self._databases[url]
        except KeyError:
            msg = f"No connection pool registered for {_redact(url)}"
            raise LookupError(msg) from None

    async def close(self, url: str) -> None:
        database = self._databases.pop(url, None)
        if database is not None:
            await database.dispose()

    async def close_all(self) -> None:
        for url in list(self._databases):
            await self.close(url)
        logger.info("Closed all connection pools")

    def __contains__(self, url: object) -> bool:
        return url in self._databases

    def __len__(self) -> int:
        return len(self._databases)


def _redact(url: str) -> str:
    scheme, separator, rest = url.partition("://")
    if not separator or "@" not in rest:
        return url
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a SQLAlchemy async session from the application's database."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
