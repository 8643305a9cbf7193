"""
Async engine and session factory.

PostgreSQL (asyncpg) is the production database. When DATABASE_URL is not
exported and USE_SQLITE_FALLBACK is on, an aiosqlite file database is used
instead and its tables are created at startup.
"""

import logging
import os
from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from simvex.config import Settings, get_settings

logger = logging.getLogger(__name__)


def resolve_database_url(settings: Settings) -> tuple[str, bool]:
    """
    Pick the database URL for this process.

    Returns:
        (url, is_sqlite_fallback)
    """
    if os.environ.get("DATABASE_URL"):
        return settings.DATABASE_URL, False
    if settings.USE_SQLITE_FALLBACK:
        return settings.SQLITE_FALLBACK_URL, True
    return settings.DATABASE_URL, False


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # ON DELETE CASCADE on members and chats relies on this
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with per-dialect connection settings."""
    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_async_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


_settings = get_settings()
_active_database_url, _using_sqlite_fallback = resolve_database_url(_settings)

if _using_sqlite_fallback:
    logger.warning(f"[DEV] DATABASE_URL not set, using SQLite fallback: {_active_database_url}")

engine = build_engine(_active_database_url, echo=_settings.DEBUG)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def is_using_sqlite_fallback() -> bool:
    return _using_sqlite_fallback


def get_active_database_url() -> str:
    return _active_database_url


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides one session per request.

    The session commits after the endpoint returns and rolls back if it
    raised, so service methods only flush.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
