# python
"""Database engine and session utilities.

The application owns one :class:`Database` instance, created in the lifespan
handler and stored on ``app.state``. Request handlers receive sessions from
it through the :func:`get_db` dependency.
"""
import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and the session factory built on it."""

    def __init__(self, url: str | None, echo: bool = False):
        url = (url or "").strip()
        if not url:
            raise RuntimeError(
                "DATABASE_URL is not configured. Set it in the environment or .env file "
                "(e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
            )
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)

    async def connect(self, create_tables: bool = False) -> bool:
        """Open a first connection, optionally creating tables.

        Connection errors are logged, not raised; there is no reconnect policy.
        """
        try:
            async with self.engine.begin() as conn:
                if create_tables:
                    await conn.run_sync(Base.metadata.create_all)
                else:
                    await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection failed: %s", e)
            return False
        logger.info("Database connection established")
        return True

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", e)
            return False

    async def session(self) -> AsyncGenerator[AsyncSession, Any]:
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
