from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import CurrentUser
from src.app.use_cases.sessions import (
    ActiveSessionsResponse,
    SessionActionResponse,
    SessionHistoryResponse,
    SessionQueryUseCase,
    SessionStatsResponse,
)
from src.depends import get_current_user, get_unit_of_work, track_session_activity

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
    dependencies=[Depends(track_session_activity)],
)


def _raise_for(error):
    if error.code == "SESSION_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == "FORBIDDEN":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    raise ServerError(error)


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionHistoryResponse)
async def get_session_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    active_only: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Session history of the caller, newest login first"""
    use_case = SessionQueryUseCase(uow)
    result = await use_case.history(
        UUID(current_user.id), page=page, limit=limit, active_only=active_only
    )
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get("/active", status_code=status.HTTP_200_OK, response_model=ActiveSessionsResponse)
async def get_active_sessions(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Live sessions of the caller"""
    use_case = SessionQueryUseCase(uow)
    result = await use_case.active(UUID(current_user.id))
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.get("/stats", status_code=status.HTTP_200_OK, response_model=SessionStatsResponse)
async def get_session_stats(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Session counters and device breakdown of the caller"""
    use_case = SessionQueryUseCase(uow)
    result = await use_case.stats(UUID(current_user.id))
    if result.is_err():
        _raise_for(result.error)
    return result.value


class SessionActivityRequest(BaseModel):
    """Request to record activity on a session"""

    session_id: str = Field(..., min_length=1, description="Session to touch")


@router.patch("/activity", status_code=status.HTTP_200_OK, response_model=SessionActionResponse)
async def update_session_activity(
    request: SessionActivityRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update last activity of a live session

    Raises:
        - 404 Not Found: Session unknown, closed, expired, or not the caller's
    """
    use_case = SessionQueryUseCase(uow)
    result = await use_case.update_activity(request.session_id, UUID(current_user.id))
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.delete("/all", status_code=status.HTTP_200_OK, response_model=SessionActionResponse)
async def terminate_all_sessions(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Log out everywhere"""
    use_case = SessionQueryUseCase(uow)
    result = await use_case.terminate_all(UUID(current_user.id))
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.delete(
    "/{session_id}", status_code=status.HTTP_200_OK, response_model=SessionActionResponse
)
async def terminate_session(
    session_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Terminate one session

    Raises:
        - 403 Forbidden: Session belongs to another user
        - 404 Not Found: Session not found
    """
    use_case = SessionQueryUseCase(uow)
    result = await use_case.terminate(session_id, UUID(current_user.id))
    if result.is_err():
        _raise_for(result.error)
    return result.value
