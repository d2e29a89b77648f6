"""
Database engine and sessions for the portal stores.

The engine is built on first use so tests can point DATABASE_URL at sqlite
before anything connects. Handlers receive a session from `get_db`; the
session is committed only when the handler left pending ORM changes.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator, Optional

from soc_portal.core.config import settings
from soc_portal.core.logging_config import logger

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def async_database_url(url: str) -> str:
    """Map sync driver URLs onto their async drivers"""
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
    return url


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = async_database_url(settings.DATABASE_URL)
        if url.startswith("sqlite"):
            # One connection per session; aiosqlite runs on its own thread
            _engine = create_async_engine(
                url,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
                poolclass=NullPool,
            )
        else:
            _engine = create_async_engine(
                url,
                echo=settings.DB_ECHO,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=1800,
                pool_pre_ping=True,
            )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency.

    Commits ORM changes the handler did not commit itself, rolls back when the
    handler raises. Core `update()` statements leave no pending objects, so
    handlers that issue them commit explicitly.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables for every portal model"""
    import soc_portal.models  # noqa: F401  registers the tables on Base.metadata

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready ({len(Base.metadata.tables)} tables)")


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
