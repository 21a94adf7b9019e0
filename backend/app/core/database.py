"""
Database engine and sessions for the portal.

The engine and session factory are created lazily on first use so that
tests can set DATABASE_URL before anything connects.
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from typing import Any, AsyncGenerator, Dict, Optional

from app.core.config import settings

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """DATABASE_URL with the async driver filled in for plain postgres URLs"""
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


def _engine_options(db_url: str) -> Dict[str, Any]:
    """
    Pooling per backend:
    - SQLite: NullPool, connections are not shared across threads
    - PostgreSQL in development: NullPool
    - PostgreSQL otherwise: QueuePool sized from the DB_POOL_* settings
    """
    options: Dict[str, Any] = {"echo": settings.DB_ECHO}

    if db_url.startswith("sqlite"):
        options.update(connect_args={"check_same_thread": False}, poolclass=NullPool)
    elif settings.DEBUG or settings.ENVIRONMENT == "development":
        options.update(poolclass=NullPool)
    else:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        db_url = get_database_url()
        _engine = create_async_engine(db_url, **_engine_options(db_url))
    return _engine


def get_session_local() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the engine; objects stay usable after commit"""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own changes; anything still pending when the
    handler returns is committed here, and an exception rolls it back.
    """
    async with get_session_local()() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_database() -> bool:
    """True when the users table can be queried"""
    async with get_session_local()() as session:
        await session.execute(text("SELECT 1"))
        try:
            await session.execute(text("SELECT COUNT(*) FROM users"))
        except Exception:
            return False
    return True


async def init_db():
    """Create all tables that do not exist yet"""
    import app.models  # noqa: F401  register every model on the metadata

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
