from __future__ import annotations

from datetime import UTC, date, datetime

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import ActorSnapshot, AssessmentProcessStatus, StatusHistoryEntry
from src.infrastructure.db.models import AssessmentProcess, ProcessStatusHistory

logger = structlog.get_logger()


def as_utc(value: datetime) -> datetime:
    """SQLite hands timestamps back naive; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class ProcessRepository:
    """Persistence for process status and its history log.

    Does not commit; the owning unit of work decides when the transaction ends.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def read_process_status(self, process_id: str) -> AssessmentProcessStatus | None:
        stmt = select(AssessmentProcess.status).where(AssessmentProcess.id == process_id)
        return await self.session.scalar(stmt)

    async def conditional_update_status(
        self,
        process_id: str,
        expected: AssessmentProcessStatus,
        next_status: AssessmentProcessStatus,
    ) -> bool:
        """Set the status only if it still equals ``expected``; return whether a row changed."""
        stmt = (
            update(AssessmentProcess)
            .where(
                AssessmentProcess.id == process_id,
                AssessmentProcess.status == expected,
            )
            .values(status=next_status, active=next_status.is_active)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def append_history(self, process_id: str, entry: StatusHistoryEntry) -> None:
        self.session.add(
            ProcessStatusHistory(
                process_id=process_id,
                status=entry.status,
                changed_at=entry.changed_at,
                changed_by_id=entry.changed_by.id,
                changed_by_name=entry.changed_by.name,
            )
        )
        await self.session.flush()

    async def latest_change_at(self, process_id: str) -> datetime | None:
        stmt = select(func.max(ProcessStatusHistory.changed_at)).where(
            ProcessStatusHistory.process_id == process_id
        )
        latest = await self.session.scalar(stmt)
        return as_utc(latest) if latest is not None else None

    async def create_process(
        self,
        *,
        name: str,
        start_date: date,
        end_date: date,
        created_by: ActorSnapshot,
        created_at: datetime | None = None,
    ) -> str:
        """Insert a process in its initial stage together with its first history entry."""
        initial = AssessmentProcessStatus.initial()
        process = AssessmentProcess(
            name=name,
            status=initial,
            active=True,
            start_date=start_date,
            end_date=end_date,
        )
        self.session.add(process)
        await self.session.flush()

        await self.append_history(
            process.id,
            StatusHistoryEntry(
                status=initial,
                changed_at=created_at or datetime.now(UTC),
                changed_by=created_by,
            ),
        )
        logger.info("process_created", process_id=process.id, name=name)
        return process.id
