"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. SQLite (aiosqlite) is the default
engine; any async SQLAlchemy URL can be configured.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from parcel_tracker.app.core.config import settings


def build_engine(database_url: str):
    """Create the async engine, applying pool sizing only where the dialect pools connections."""
    options = {"echo": settings.db_echo, "future": True}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return create_async_engine(database_url, **options)


# Create async engine
engine = build_engine(settings.database_url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


def get_parcel_store():
    """
    FastAPI dependency for the parcel repository.

    The store opens one short-lived session per statement from the shared
    factory, so a single instance is safe to hand to concurrent requests.
    """
    from parcel_tracker.app.repositories.parcel_store import ParcelStore

    return ParcelStore(AsyncSessionLocal)
