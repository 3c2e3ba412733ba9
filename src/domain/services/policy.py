"""Authorization policy for assessment process status transitions."""

from __future__ import annotations

from collections.abc import Iterable

from src.core.auth import Role
from src.domain.models import AssessmentProcessStatus

_STAFF = frozenset({Role.MANAGER.value, Role.ADMIN.value})

# (current, requested) -> roles allowed to perform the move
TRANSITION_POLICY: dict[
    tuple[AssessmentProcessStatus, AssessmentProcessStatus], frozenset[str]
] = {
    (
        AssessmentProcessStatus.IN_DEFINITION,
        AssessmentProcessStatus.IN_SELF_ASSESSMENT,
    ): _STAFF,
    (
        AssessmentProcessStatus.IN_SELF_ASSESSMENT,
        AssessmentProcessStatus.AWAITING_MANAGER_ASSESSMENT,
    ): _STAFF,
    (
        AssessmentProcessStatus.AWAITING_MANAGER_ASSESSMENT,
        AssessmentProcessStatus.COMPLETED,
    ): _STAFF,
}


def is_transition_allowed(
    current: AssessmentProcessStatus,
    requested: AssessmentProcessStatus,
    roles: Iterable[str],
) -> bool:
    """Return True when any of ``roles`` may move a process from ``current`` to ``requested``."""
    allowed = TRANSITION_POLICY.get((current, requested))
    if not allowed:
        return False
    return not allowed.isdisjoint(roles)
