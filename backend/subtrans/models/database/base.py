"""Database engine, session factory and declarative base."""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from subtrans.config import settings


class Base(DeclarativeBase):
    """Shared declarative base for all models."""


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for the cache database.

    SQLite connections are opened per use so the engine can be shared
    between event loops (background jobs, CLI runs, test clients).

    Args:
        database_url: SQLAlchemy async database URL

    Returns:
        Configured AsyncEngine
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, poolclass=NullPool)
    return create_async_engine(database_url, pool_pre_ping=True)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(engine, expire_on_commit=False)


engine = create_engine(settings.database_url)
async_session_maker = create_session_maker(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on the metadata
    from subtrans.models.database import cache_record  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a database session."""
    async with async_session_maker() as session:
        yield session
