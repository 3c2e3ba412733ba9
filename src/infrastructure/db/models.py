from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from src.domain.models import AssessmentProcessStatus

from .base import Base

process_status_enum = Enum(
    AssessmentProcessStatus,
    name="assessment_process_status",
    values_callable=lambda e: [x.value for x in e],
)


class AssessmentProcess(Base):
    """A bounded review cycle tracked through four lifecycle stages."""

    __tablename__ = "assessment_processes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[AssessmentProcessStatus] = mapped_column(
        process_status_enum,
        default=AssessmentProcessStatus.IN_DEFINITION,
        nullable=False,
        index=True,
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    history: Mapped[list[ProcessStatusHistory]] = relationship(
        back_populates="process",
        cascade="all,delete-orphan",
        order_by="ProcessStatusHistory.id",
    )

    def __repr__(self) -> str:
        return f"<AssessmentProcess(id={self.id}, status={self.status.value})>"


class ProcessStatusHistory(Base):
    """Append-only audit trail of status changes; never updated in place."""

    __tablename__ = "assessment_process_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    process_id: Mapped[str] = mapped_column(
        ForeignKey("assessment_processes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[AssessmentProcessStatus] = mapped_column(process_status_enum, nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Snapshot of the actor, not a reference to a live user row
    changed_by_id: Mapped[str] = mapped_column(String(64), nullable=False)
    changed_by_name: Mapped[str] = mapped_column(String(255), nullable=False)

    process: Mapped[AssessmentProcess] = relationship(back_populates="history")


class GoalCategory(Base):
    __tablename__ = "goal_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


__all__ = [
    "AssessmentProcessStatus",
    "AssessmentProcess",
    "ProcessStatusHistory",
    "GoalCategory",
    "process_status_enum",
]
