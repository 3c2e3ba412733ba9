from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime


class AssessmentProcessStatus(str, enum.Enum):
    """Lifecycle stages of an assessment process, in progression order.

    Note: Must use name='assessment_process_status' in Enum() to match database enum type.
    """

    IN_DEFINITION = "in_definition"
    IN_SELF_ASSESSMENT = "in_self_assessment"
    AWAITING_MANAGER_ASSESSMENT = "awaiting_manager_assessment"
    COMPLETED = "completed"

    @classmethod
    def initial(cls) -> AssessmentProcessStatus:
        return cls.IN_DEFINITION

    @property
    def successor(self) -> AssessmentProcessStatus | None:
        """Immediate next stage, or None for the terminal stage."""
        ordered = list(type(self))
        position = ordered.index(self)
        if position + 1 < len(ordered):
            return ordered[position + 1]
        return None

    @property
    def is_terminal(self) -> bool:
        return self.successor is None

    @property
    def is_active(self) -> bool:
        return not self.is_terminal


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    name: str = ""
    roles: list[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.user_id

    def snapshot(self) -> ActorSnapshot:
        return ActorSnapshot(id=self.user_id, name=self.display_name)


@dataclass(frozen=True, slots=True)
class ActorSnapshot:
    """Identity of the actor as it was when a change was made."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class StatusHistoryEntry:
    status: AssessmentProcessStatus
    changed_at: datetime
    changed_by: ActorSnapshot


@dataclass(slots=True)
class AssessmentProcess:
    """Read view of an assessment process."""

    process_id: str
    name: str
    status: AssessmentProcessStatus
    active: bool
    start_date: date
    end_date: date


@dataclass(frozen=True, slots=True)
class TransitionResult:
    process_id: str
    previous_status: AssessmentProcessStatus
    status: AssessmentProcessStatus
    history_entry: StatusHistoryEntry

    @property
    def changed_at(self) -> datetime:
        return self.history_entry.changed_at


@dataclass(frozen=True, slots=True)
class GoalCategory:
    category_id: str
    name: str
