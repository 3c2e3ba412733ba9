from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import any_role, get_db_session
from src.api.schemas.goal_categories import GoalCategoryItem, GoalCategoryListResponse
from src.domain import User
from src.domain.services.goal_categories import GoalCategoryService

router = APIRouter(prefix="/api/goal-categories", tags=["Goal categories"])


@router.get("", response_model=GoalCategoryListResponse)
async def list_goal_categories(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(any_role),
) -> GoalCategoryListResponse:
    """Return all goal categories sorted by name."""
    categories = await GoalCategoryService(session).list_categories()
    return GoalCategoryListResponse(
        categories=[
            GoalCategoryItem(id=category.category_id, name=category.name)
            for category in categories
        ]
    )
