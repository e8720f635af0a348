"""
Async database engine and session management.
Uses SQLAlchemy 2.0 with asyncpg (PostgreSQL) or aiosqlite (local runs and tests).
"""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def get_engine():
    """Create async engine. PostgreSQL gets a pooled engine; SQLite opens a connection per use."""
    settings = get_settings()
    db_url = settings.database_url

    if not db_url:
        error_msg = "DATABASE_URL is not configured"
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info(f"Connecting to database: {db_url.split('@')[1] if '@' in db_url else db_url.split('://')[0]}")

    if db_url.startswith("sqlite"):
        return create_async_engine(db_url, poolclass=NullPool)

    return create_async_engine(
        db_url,
        pool_size=10,
        max_overflow=5,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=False,
    )


engine = get_engine()
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a database session. Caller must not log session contents."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for explicit transaction. Commits on exit, rolls back on exception."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Transaction rolled back")
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema verified")


async def drop_db() -> None:
    """Drop all tables. Used by the test suite and local resets."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Dispose of the connection pool."""
    await engine.dispose()
    logger.info("Database pool disposed")
