from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from src.core.config import Settings, get_settings


def create_database_engine(settings: Settings | None = None) -> AsyncEngine:
    """Build the async engine; owned by the application lifespan, not by this module."""
    settings = settings or get_settings()
    return create_async_engine(
        settings.async_database_url,
        echo=False,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
    )
