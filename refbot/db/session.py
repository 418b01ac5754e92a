from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)

from refbot.core.config import make_async_db_url

log = logging.getLogger(__name__)

# asyncpg raises connection failures (refused, timed out) unwrapped
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def init_engine(database_url: str, **engine_kwargs: Any) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Creates the engine and its sessionmaker.

    Non-postgres urls (sqlite+aiosqlite in tests) are passed through untouched.
    """
    if database_url.startswith("postgres"):
        database_url = make_async_db_url(database_url)
    engine_kwargs.setdefault("pool_pre_ping", True)
    engine = create_async_engine(database_url, **engine_kwargs)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    log.info("db_engine_initialized dialect=%s", engine.dialect.name)
    return engine, sessionmaker


@asynccontextmanager
async def session_scope(sessionmaker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """AsyncSession context manager."""
    async with sessionmaker() as session:
        yield session
