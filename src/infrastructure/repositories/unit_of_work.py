from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.repositories.processes import ProcessRepository

logger = structlog.get_logger()


class UnitOfWork:
    """One transaction over an injected session.

    Commits on a clean exit and rolls back when the block raises, so the
    status update and its history entry land together or not at all.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.processes = ProcessRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        logger.debug("uow_enter")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            try:
                await self.commit()
            except Exception:
                await self.rollback()
                raise
        logger.debug("uow_exit", exc_type=str(exc_type) if exc_type else None)

    async def commit(self) -> None:
        logger.debug("uow_commit")
        await self.session.commit()

    async def rollback(self) -> None:
        logger.debug("uow_rollback")
        await self.session.rollback()
