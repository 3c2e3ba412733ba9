from __future__ import annotations

from datetime import UTC, date, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.api.deps import issue_smoke_token
from src.core.auth import Role
from src.domain import ActorSnapshot
from src.infrastructure.repositories.unit_of_work import UnitOfWork


def auth_headers(
    user_id: str = "manager-1",
    role: Role = Role.MANAGER,
    name: str | None = "Maria Manager",
) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com", name=name)
    return {"Authorization": f"Bearer {token}"}


async def create_process(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    name: str = "Annual review",
    start_date: date = date(2025, 1, 1),
    end_date: date = date(2025, 12, 31),
    created_at: datetime | None = None,
) -> str:
    """Insert a process the way the creation flow does, with its initial history entry."""
    async with session_factory() as session, UnitOfWork(session) as uow:
        process_id = await uow.processes.create_process(
            name=name,
            start_date=start_date,
            end_date=end_date,
            created_by=ActorSnapshot(id="hr-1", name="HR Admin"),
            created_at=created_at or datetime(2025, 1, 1, 9, 0, tzinfo=UTC),
        )
    return process_id
