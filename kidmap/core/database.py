"""
Database configuration and session management
"""

import logging
from typing import Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from kidmap.config import settings

logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    SQLite ignores foreign keys unless asked per connection; relation rows
    rely on them for ON DELETE CASCADE.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _set_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine for the configured database
    """
    url = database_url or settings.DATABASE_URL

    if settings.is_testing or url.startswith("sqlite"):
        # NullPool doesn't accept pool parameters
        engine = create_async_engine(url, echo=settings.DB_ECHO, poolclass=NullPool)
        if url.startswith("sqlite"):
            enable_sqlite_foreign_keys(engine)
        return engine

    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the session factory shared by all request handlers
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine):
    """
    Create tables that do not exist yet
    """
    # Tables are registered on Base.metadata when the models are imported
    import kidmap.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db(engine: AsyncEngine):
    """
    Close database connections
    """
    await engine.dispose()
    logger.info("Database connections closed")


async def ping(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """
    Check that the database answers a trivial query
    """
    try:
        async with session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory created at startup
    """
    return request.app.state.session_factory
