"""SQLAlchemy async engine and session factory configuration.

Nothing is created at import time: the job store is in-memory unless the
application is configured with ``JOB_STORE=database``.
"""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from js_extractor.infrastructure.database.base import Base
from js_extractor.infrastructure.database import models  # noqa: F401  (registers tables)

logger = logging.getLogger(__name__)


def get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _ensure_sqlite_directory(async_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(async_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Build an async engine for ``database_url`` (sync-style URLs accepted)."""
    async_url = get_async_url(database_url)
    _ensure_sqlite_directory(async_url)
    return create_async_engine(async_url, echo=echo, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all job store tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Job store tables ready")
