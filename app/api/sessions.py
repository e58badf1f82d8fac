"""Study sessions API endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status

from app.models.study_session import SessionStatus
from app.schemas.base import MessageResponse
from app.schemas.session import (
    SessionComplete,
    SessionCreate,
    SessionEnvelope,
    SessionListResponse,
    SessionMessageEnvelope,
    SessionResponse,
    SessionStats,
    SessionStatsResponse,
    SessionUpdate,
)
from app.services.session_service import SessionService
from app.utils.dependencies import dependencies, get_current_user_id

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
)


@router.get("")
async def list_sessions(
    status: Optional[SessionStatus] = Query(default=None),
    subject_id: Optional[int] = Query(default=None, alias="subjectId"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionListResponse:
    """List the caller's sessions, newest scheduled start first.

    Args:
        status: Only sessions in this status.
        subject_id: Only sessions of this subject.
        start_date: Lower bound on scheduled start, inclusive.
        end_date: Upper bound on scheduled start, inclusive.
    """
    sessions = await service.list_sessions(
        user_id,
        status=status,
        subject_id=subject_id,
        start_date=start_date,
        end_date=end_date,
    )
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions],
        total=len(sessions),
    )


@router.post("", status_code=http_status.HTTP_201_CREATED)
async def create_session(
    data: SessionCreate,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionMessageEnvelope:
    """Schedule a study session."""
    session = await service.create_session(user_id, **data.model_dump())
    return SessionMessageEnvelope(
        message="Study session created successfully",
        session=SessionResponse.model_validate(session),
    )


@router.get("/stats")
async def get_session_stats(
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionStatsResponse:
    """Status counts, hours studied, mean focus and completion rate."""
    stats = await service.get_stats(user_id)
    return SessionStatsResponse(stats=SessionStats.model_validate(stats))


@router.get("/{session_id}")
async def get_session(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionEnvelope:
    session = await service.get_session(user_id, session_id)
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.put("/{session_id}")
async def update_session(
    session_id: int,
    data: SessionUpdate,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionMessageEnvelope:
    """Partially update a session, including a direct status change."""
    session = await service.update_session(
        user_id, session_id, data.model_dump(exclude_unset=True)
    )
    return SessionMessageEnvelope(
        message="Session updated successfully",
        session=SessionResponse.model_validate(session),
    )


@router.delete("/{session_id}")
async def delete_session(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> MessageResponse:
    await service.delete_owned(session_id, user_id)
    return MessageResponse(message="Session deleted successfully")


@router.patch("/{session_id}/start")
async def start_session(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionMessageEnvelope:
    """Begin a session now."""
    session = await service.start_session(user_id, session_id)
    return SessionMessageEnvelope(
        message="Session started",
        session=SessionResponse.model_validate(session),
    )


@router.patch("/{session_id}/complete")
async def complete_session(
    session_id: int,
    data: Optional[SessionComplete] = None,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(dependencies.session),
) -> SessionMessageEnvelope:
    """Finish a session now and credit its duration to the subject."""
    data = data or SessionComplete()
    session = await service.complete_session(
        user_id, session_id, focus_score=data.focus_score, notes=data.notes
    )
    return SessionMessageEnvelope(
        message="Session completed",
        session=SessionResponse.model_validate(session),
    )
