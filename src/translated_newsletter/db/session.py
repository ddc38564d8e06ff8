# ABOUTME: Async SQLAlchemy engine and sessions for the subscriber/configuration store.
# ABOUTME: One lazily created engine per process, sessions that commit or roll back as a unit.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from translated_newsletter.config import get_settings
from translated_newsletter.db.models import Base

log = structlog.get_logger()

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async engine.

    Connections are pinged before use: the scheduler may leave the pool idle for a day
    between runs.
    """
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
            pool_pre_ping=True,
            connect_args={"timeout": settings.db_connect_timeout},
            echo=settings.log_level == "DEBUG",
        )
        log.debug("db_engine_created", host=settings.db_host, database=settings.db_name)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on success and rolls back when the block raises.

    Usage:
        async with get_session() as session:
            await NewsletterUserRepository(session).list_all()
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            log.warning("db_session_rollback")
            await session.rollback()
            raise


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with get_session() as session:
        yield session


async def init_db() -> None:
    """Create the subscriber and configuration tables when missing."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("db_tables_ready", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    """Dispose of the engine; the next session creates a new one."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        log.debug("db_engine_disposed")
    _engine = None
    _session_factory = None
