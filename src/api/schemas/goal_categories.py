from __future__ import annotations

from pydantic import BaseModel


class GoalCategoryItem(BaseModel):
    id: str
    name: str


class GoalCategoryListResponse(BaseModel):
    categories: list[GoalCategoryItem]
