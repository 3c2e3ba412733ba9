"""Domain layer for assessment processes."""

from src.domain.models import (
    ActorSnapshot,
    AssessmentProcess,
    AssessmentProcessStatus,
    GoalCategory,
    StatusHistoryEntry,
    TransitionResult,
    User,
)

__all__ = [
    "ActorSnapshot",
    "AssessmentProcess",
    "AssessmentProcessStatus",
    "GoalCategory",
    "StatusHistoryEntry",
    "TransitionResult",
    "User",
]
