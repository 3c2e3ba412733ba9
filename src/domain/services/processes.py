"""Read-side queries for assessment processes and their status history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import (
    ActorSnapshot,
    AssessmentProcess,
    AssessmentProcessStatus,
    StatusHistoryEntry,
)
from src.domain.services.process_lifecycle import ProcessNotFoundError
from src.infrastructure.db import models
from src.infrastructure.repositories.processes import as_utc

if TYPE_CHECKING:
    from sqlalchemy import Select


class ProcessService:
    """Listing and lookup of processes; never mutates them."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_processes(
        self,
        *,
        status: AssessmentProcessStatus | None = None,
        active: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[AssessmentProcess], int]:
        filters = []
        if status is not None:
            filters.append(models.AssessmentProcess.status == status)
        if active is not None:
            filters.append(models.AssessmentProcess.active == active)

        count_stmt = select(func.count()).select_from(models.AssessmentProcess).where(*filters)
        total = await self.session.scalar(count_stmt) or 0

        stmt: Select[tuple[models.AssessmentProcess]] = (
            select(models.AssessmentProcess)
            .where(*filters)
            .order_by(
                models.AssessmentProcess.start_date.desc(),
                models.AssessmentProcess.name,
            )
            .offset((page - 1) * limit)
            .limit(limit)
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [_to_process(row) for row in rows], total

    async def get_process(self, process_id: str) -> AssessmentProcess:
        row = await self.session.get(models.AssessmentProcess, process_id)
        if row is None:
            raise ProcessNotFoundError(f"Assessment process {process_id} not found")
        return _to_process(row)

    async def get_history(self, process_id: str) -> list[StatusHistoryEntry]:
        exists = await self.session.scalar(
            select(models.AssessmentProcess.id).where(models.AssessmentProcess.id == process_id)
        )
        if exists is None:
            raise ProcessNotFoundError(f"Assessment process {process_id} not found")

        stmt = (
            select(models.ProcessStatusHistory)
            .where(models.ProcessStatusHistory.process_id == process_id)
            .order_by(
                models.ProcessStatusHistory.changed_at,
                models.ProcessStatusHistory.id,
            )
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [
            StatusHistoryEntry(
                status=row.status,
                changed_at=as_utc(row.changed_at),
                changed_by=ActorSnapshot(id=row.changed_by_id, name=row.changed_by_name),
            )
            for row in rows
        ]


def _to_process(row: models.AssessmentProcess) -> AssessmentProcess:
    return AssessmentProcess(
        process_id=row.id,
        name=row.name,
        status=row.status,
        active=row.active,
        start_date=row.start_date,
        end_date=row.end_date,
    )
