"""Database configuration and session management.

The engine is created on first use so that the in-memory catalog
backend never needs a database driver or a reachable server.
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storefront.infrastructure.config import settings


class Base(DeclarativeBase):
    """Declarative base for catalog tables."""


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Get the shared async engine.

    Returns:
        AsyncEngine bound to ``settings.database_url``.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the shared session factory.

    Returns:
        Session factory producing AsyncSession instances.
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables() -> None:
    """Create catalog tables if they don't exist.

    Used by the seeding script; deployed environments run Alembic.
    """
    # Register table metadata
    from storefront.infrastructure import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

