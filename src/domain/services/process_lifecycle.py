"""
Assessment process lifecycle.

The only code path that changes a process status:
    in_definition -> in_self_assessment -> awaiting_manager_assessment -> completed

Each accepted transition is one conditional update keyed on the expected
current status plus one appended history entry, committed together.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError
from src.domain.models import (
    AssessmentProcessStatus,
    StatusHistoryEntry,
    TransitionResult,
    User,
)
from src.domain.services.policy import is_transition_allowed
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()


class ProcessLifecycleError(Exception):
    """Base exception for lifecycle failures."""


class ProcessNotFoundError(ProcessLifecycleError):
    """Raised when the process id does not resolve to a stored process."""


class InvalidTransitionError(ProcessLifecycleError):
    """Raised when the requested status is not the immediate successor."""


class StaleStateError(ProcessLifecycleError):
    """Raised when the caller's view of the status is out of date.

    Recoverable: re-read the process and retry.
    """


class UnauthorizedTransitionError(ProcessLifecycleError):
    """Raised when the actor lacks the capability for the transition."""


class PersistenceFailureError(ProcessLifecycleError):
    """Raised when storage fails mid-transition; nothing was applied and a retry is safe."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProcessLifecycle:
    """Validates and applies status transitions with an audit trail."""

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        policy: Callable[..., bool] = is_transition_allowed,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.uow = uow
        self.policy = policy
        self.clock = clock

    async def transition(
        self,
        process_id: str,
        current_status: AssessmentProcessStatus,
        requested_status: AssessmentProcessStatus,
        actor: User,
    ) -> TransitionResult:
        log = logger.bind(
            process_id=process_id,
            current_status=current_status.value,
            requested_status=requested_status.value,
            actor_id=actor.user_id,
        )
        try:
            async with self.uow as uow:
                persisted = await uow.processes.read_process_status(process_id)
                if persisted is None:
                    raise ProcessNotFoundError(f"Assessment process {process_id} not found")

                if persisted != current_status:
                    raise StaleStateError(
                        f"Process status is {persisted.value}, not {current_status.value}; "
                        "reload and retry"
                    )

                if requested_status != current_status.successor:
                    raise InvalidTransitionError(
                        _invalid_transition_message(current_status, requested_status)
                    )

                if not self.policy(current_status, requested_status, actor.roles):
                    raise UnauthorizedTransitionError(
                        f"User {actor.user_id} may not move a process from "
                        f"{current_status.value} to {requested_status.value}"
                    )

                applied = await uow.processes.conditional_update_status(
                    process_id, current_status, requested_status
                )
                if not applied:
                    raise StaleStateError(
                        "Process status changed by a concurrent request; reload and retry"
                    )

                entry = StatusHistoryEntry(
                    status=requested_status,
                    changed_at=await self._next_timestamp(uow, process_id),
                    changed_by=actor.snapshot(),
                )
                await uow.processes.append_history(process_id, entry)
        except ProcessLifecycleError as exc:
            await log.awarning(
                "process_transition_rejected",
                reason=type(exc).__name__,
                detail=str(exc),
            )
            raise
        except SQLAlchemyError as exc:
            await log.aerror("process_transition_persistence_failed", error=str(exc))
            raise PersistenceFailureError(
                "Could not save the status change; no changes were applied"
            ) from exc

        await log.ainfo("process_status_changed", changed_at=entry.changed_at.isoformat())
        return TransitionResult(
            process_id=process_id,
            previous_status=current_status,
            status=requested_status,
            history_entry=entry,
        )

    async def _next_timestamp(self, uow: UnitOfWork, process_id: str) -> datetime:
        # History timestamps must never go backwards, even across clock skew
        now = self.clock()
        latest = await uow.processes.latest_change_at(process_id)
        if latest is not None and latest > now:
            return latest
        return now


def _invalid_transition_message(
    current: AssessmentProcessStatus, requested: AssessmentProcessStatus
) -> str:
    if current.is_terminal:
        return f"Process is {current.value}; no further transitions are possible"
    if requested == current:
        return f"Process is already {current.value}"
    return (
        f"Cannot move from {current.value} to {requested.value}; "
        f"next allowed status is {current.successor.value}"
    )
