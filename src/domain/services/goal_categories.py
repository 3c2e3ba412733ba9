from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import GoalCategory
from src.infrastructure.db import models


class GoalCategoryService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_categories(self) -> list[GoalCategory]:
        stmt = select(models.GoalCategory).order_by(models.GoalCategory.name)
        rows = (await self.session.execute(stmt)).scalars().all()
        return [GoalCategory(category_id=row.id, name=row.name) for row in rows]
