from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from src.domain.models import AssessmentProcessStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AssessmentProcessItem(CamelModel):
    id: str
    name: str
    status: AssessmentProcessStatus
    active: bool
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")


class AssessmentProcessListResponse(CamelModel):
    processes: list[AssessmentProcessItem]
    total: int
    page: int
    limit: int


class ChangedBy(CamelModel):
    id: str
    name: str


class StatusHistoryItem(CamelModel):
    status: AssessmentProcessStatus
    changed_at: datetime = Field(..., alias="changedAt")
    changed_by: ChangedBy = Field(..., alias="changedBy")


class StatusHistoryResponse(CamelModel):
    history: list[StatusHistoryItem]


class UpdateProcessStatusRequest(CamelModel):
    status: AssessmentProcessStatus = Field(..., description="Requested next status")
    expected_status: AssessmentProcessStatus | None = Field(
        None,
        alias="expectedStatus",
        description="Status the caller last saw; omitted means the currently stored status",
    )


class UpdateProcessStatusResponse(CamelModel):
    id: str
    status: AssessmentProcessStatus
    previous_status: AssessmentProcessStatus = Field(..., alias="previousStatus")
    changed_at: datetime = Field(..., alias="changedAt")
