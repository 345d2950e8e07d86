"""Drafts database engine and session factory.

One async engine per process, built on first use from
:func:`~survey_runtime_db.config.get_async_url`.  The CLI calls
``init_models()`` before the first session and ``dispose_engine()`` on exit.
"""

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from survey_runtime_db.config import get_async_url, get_drafts_dir, is_sqlite
from survey_runtime_db.models.base import Base

# Connection pool tuning for server databases, overridable via
# DRAFTS_POOL_SIZE / DRAFTS_MAX_OVERFLOW env vars.  SQLite ignores them.
_POOL_SIZE = int(os.getenv("DRAFTS_POOL_SIZE", "5"))
_MAX_OVERFLOW = int(os.getenv("DRAFTS_MAX_OVERFLOW", "10"))

# Module-level singleton so the entire process shares one connection pool.
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Engine for the drafts database, created on first call."""
    global _engine
    if _engine is None:
        url = get_async_url()
        if is_sqlite(url):
            if not os.getenv("DRAFTS_DATABASE_URL"):
                # Default file location; create its directory on first use
                get_drafts_dir().mkdir(parents=True, exist_ok=True)
            _engine = create_async_engine(url, echo=False)
        else:
            _engine = create_async_engine(
                url,
                echo=False,
                pool_size=_POOL_SIZE,
                max_overflow=_MAX_OVERFLOW,
            )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to :func:`get_engine`."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create the drafts table if it does not exist yet."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine's connection pool (call on shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
