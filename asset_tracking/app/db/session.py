"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. PostgreSQL (asyncpg) is the
production target; SQLite (aiosqlite) works for local runs.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from asset_tracking.app.core.config import settings


def engine_options(database_url: str) -> dict:
    """Engine keyword arguments suited to the database backend."""
    options = {"echo": settings.db_echo, "future": True}
    if make_url(database_url).get_backend_name() == "sqlite":
        # SQLite connections are file handles; pool sizing does not apply
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
        options["pool_pre_ping"] = True
    return options


# Create async engine
engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.
    
    Yields one session per request. Uncommitted work is rolled back
    when the request fails.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
