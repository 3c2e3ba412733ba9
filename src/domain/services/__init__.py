"""Domain services."""

from src.domain.services.goal_categories import GoalCategoryService
from src.domain.services.policy import TRANSITION_POLICY, is_transition_allowed
from src.domain.services.process_lifecycle import (
    InvalidTransitionError,
    PersistenceFailureError,
    ProcessLifecycle,
    ProcessLifecycleError,
    ProcessNotFoundError,
    StaleStateError,
    UnauthorizedTransitionError,
)
from src.domain.services.processes import ProcessService

__all__ = [
    "GoalCategoryService",
    "InvalidTransitionError",
    "PersistenceFailureError",
    "ProcessLifecycle",
    "ProcessLifecycleError",
    "ProcessNotFoundError",
    "ProcessService",
    "StaleStateError",
    "TRANSITION_POLICY",
    "UnauthorizedTransitionError",
    "is_transition_allowed",
]
