"""Optional PostgreSQL backing for calculator state and audit rows.

When the database cannot be reached at startup, ``get_session()`` yields
``None`` and callers fall back to the in-process state store.
"""

from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from capgains.config import settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None
_db_available: bool = False


async def init_db() -> None:
    """Connect, create the state and audit tables, and flag availability."""
    global _engine, _session_factory, _db_available

    try:
        _engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)
        _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False)

        from capgains.models.db_models import Base
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        _db_available = True
        logger.info("Calculator state persisted in PostgreSQL (%s).", ", ".join(Base.metadata.tables))
    except Exception as exc:
        _db_available = False
        logger.warning("PostgreSQL unavailable, keeping calculator state in memory. Error: %s", exc)


async def close_db() -> None:
    global _engine, _db_available
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _db_available = False
    logger.info("PostgreSQL connection pool closed.")


def is_db_available() -> bool:
    return _db_available


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession | None, None]:
    """One unit of work: commit on success, roll back on error.

    Yields ``None`` while running on the in-memory store.
    """
    if not _db_available or _session_factory is None:
        yield None
        return

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
