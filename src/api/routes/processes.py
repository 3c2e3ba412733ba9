from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import any_role, get_db_session, get_unit_of_work
from src.api.schemas.processes import (
    AssessmentProcessItem,
    AssessmentProcessListResponse,
    ChangedBy,
    StatusHistoryItem,
    StatusHistoryResponse,
    UpdateProcessStatusRequest,
    UpdateProcessStatusResponse,
)
from src.core.config import get_settings
from src.domain import AssessmentProcess, AssessmentProcessStatus, User
from src.domain.services.process_lifecycle import (
    InvalidTransitionError,
    PersistenceFailureError,
    ProcessLifecycle,
    ProcessNotFoundError,
    StaleStateError,
    UnauthorizedTransitionError,
)
from src.domain.services.processes import ProcessService
from src.infrastructure.repositories.unit_of_work import UnitOfWork

router = APIRouter(prefix="/api/assessment-processes", tags=["Assessment processes"])


@router.get("", response_model=AssessmentProcessListResponse)
async def list_processes(
    status_filter: AssessmentProcessStatus | None = Query(None, alias="status"),
    active: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(any_role),
) -> AssessmentProcessListResponse:
    settings = get_settings()
    page_size = min(limit or settings.default_page_size, settings.max_page_size)

    service = ProcessService(session)
    processes, total = await service.list_processes(
        status=status_filter, active=active, page=page, limit=page_size
    )
    return AssessmentProcessListResponse(
        processes=[_process_item(process) for process in processes],
        total=total,
        page=page,
        limit=page_size,
    )


@router.get("/{process_id}", response_model=AssessmentProcessItem)
async def get_process(
    process_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(any_role),
) -> AssessmentProcessItem:
    service = ProcessService(session)
    try:
        process = await service.get_process(process_id)
    except ProcessNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _process_item(process)


@router.get("/{process_id}/history", response_model=StatusHistoryResponse)
async def get_status_history(
    process_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(any_role),
) -> StatusHistoryResponse:
    service = ProcessService(session)
    try:
        entries = await service.get_history(process_id)
    except ProcessNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return StatusHistoryResponse(
        history=[
            StatusHistoryItem(
                status=entry.status,
                changed_at=entry.changed_at,
                changed_by=ChangedBy(id=entry.changed_by.id, name=entry.changed_by.name),
            )
            for entry in entries
        ]
    )


@router.patch("/{process_id}/status", response_model=UpdateProcessStatusResponse)
async def update_process_status(
    process_id: str,
    payload: UpdateProcessStatusRequest,
    session: AsyncSession = Depends(get_db_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    user: User = Depends(any_role),
) -> UpdateProcessStatusResponse:
    """
    Advance an assessment process to its next stage.

    - Only the immediate successor of the current status is accepted
    - `expectedStatus` guards against acting on a stale view (409 on mismatch)
    - Each change appends a status history entry
    """
    current_status = payload.expected_status
    try:
        if current_status is None:
            current_status = (await ProcessService(session).get_process(process_id)).status
        result = await ProcessLifecycle(uow).transition(
            process_id, current_status, payload.status, user
        )
    except ProcessNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except UnauthorizedTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except StaleStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PersistenceFailureError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return UpdateProcessStatusResponse(
        id=result.process_id,
        status=result.status,
        previous_status=result.previous_status,
        changed_at=result.changed_at,
    )


def _process_item(process: AssessmentProcess) -> AssessmentProcessItem:
    return AssessmentProcessItem(
        id=process.process_id,
        name=process.name,
        status=process.status,
        active=process.active,
        start_date=process.start_date,
        end_date=process.end_date,
    )
