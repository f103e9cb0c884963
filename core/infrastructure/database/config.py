"""
Database configuration.

Manages engine creation and the async session factory.
"""
from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.settings.modules.database_settings import DatabaseSettings


logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine_from_settings(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        settings: Database settings section

    Returns:
        Configured async engine
    """
    logger.info(f"Creating database engine: {settings.url}")

    kwargs = {"echo": settings.echo}
    if ":memory:" in settings.url:
        # One shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    elif not settings.url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True  # Test connections before using

    return create_async_engine(settings.url, **kwargs)


# Global engine instance
engine: Optional[AsyncEngine] = None


def get_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """
    Get or create global engine instance.

    Returns:
        Global async engine
    """
    global engine

    if engine is None:
        engine = create_engine_from_settings(settings or DatabaseSettings())

    return engine


# =============================================================================
# SESSION FACTORY
# =============================================================================

def get_session_factory(bind: Optional[AsyncEngine] = None) -> async_sessionmaker[AsyncSession]:
    """
    Get session factory.

    Returns:
        Session factory for creating sessions
    """
    return async_sessionmaker(
        bind=bind or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database(bind: Optional[AsyncEngine] = None) -> None:
    """
    Initialize database.

    Creates all tables if they don't exist.
    """
    from core.data.models import Base

    logger.info("Initializing database...")

    async with (bind or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database initialized successfully")


async def close_database() -> None:
    """Close database connections."""
    global engine

    if engine:
        logger.info("Closing database connections...")
        await engine.dispose()
        engine = None
        logger.info("✅ Database connections closed")
