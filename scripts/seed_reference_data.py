#!/usr/bin/env python3
"""
Seed goal categories and a sample assessment process.

Run with:
    python scripts/seed_reference_data.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio

import structlog
from sqlalchemy import select

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.models import ActorSnapshot
from src.domain.reference_data import GOAL_CATEGORIES, SAMPLE_PROCESSES, SYSTEM_ACTOR
from src.infrastructure.db.models import AssessmentProcess, GoalCategory
from src.infrastructure.db.session import create_database_engine, create_session_factory
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()


async def seed() -> None:
    settings = get_settings()
    engine = create_database_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        async with session_factory() as session, UnitOfWork(session) as uow:
            existing = set((await session.execute(select(GoalCategory.name))).scalars())
            for category in GOAL_CATEGORIES:
                if category["name"] not in existing:
                    session.add(GoalCategory(**category))

            has_processes = await session.scalar(select(AssessmentProcess.id).limit(1))
            if not has_processes:
                for process in SAMPLE_PROCESSES:
                    await uow.processes.create_process(
                        **process, created_by=ActorSnapshot(**SYSTEM_ACTOR)
                    )
        logger.info("seed_completed", categories=len(GOAL_CATEGORIES))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
