from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from src.api.deps import get_db_session
from src.api.main import app
from src.domain import User
from src.domain.reference_data import GOAL_CATEGORIES
from src.infrastructure.db import Base
from src.infrastructure.db.models import GoalCategory

from tests.utils import create_process


@pytest.fixture()
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    # File-backed so that separate sessions see the same database
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def seed_goal_categories(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        for category in GOAL_CATEGORIES:
            session.add(GoalCategory(**category))
        await session.commit()


@pytest.fixture()
async def process_id(session_factory: async_sessionmaker[AsyncSession]) -> str:
    """A freshly created process in its initial stage."""
    return await create_process(session_factory)


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def manager() -> User:
    return User(
        user_id="manager-1", email="maria@example.com", name="Maria Manager", roles=["manager"]
    )


@pytest.fixture()
def employee() -> User:
    return User(
        user_id="employee-1", email="eve@example.com", name="Eve Employee", roles=["employee"]
    )
