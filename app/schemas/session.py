"""Study session schemas for API request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.study_session import SessionStatus
from app.schemas.base import CamelModel


class SessionCreate(CamelModel):
    """Schema for scheduling a study session."""

    subject_id: int
    topic_id: Optional[int] = None
    scheduled_start: datetime
    scheduled_end: datetime
    notes: Optional[str] = None


class SessionUpdate(CamelModel):
    """Partial session patch; null clears the actual timestamps and notes."""

    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    status: Optional[SessionStatus] = None
    focus_score: Optional[int] = None
    notes: Optional[str] = None


class SessionComplete(CamelModel):
    """Payload for completing a session."""

    focus_score: Optional[int] = None
    notes: Optional[str] = None


class SessionSubject(CamelModel):
    """Subject as embedded in a session."""

    id: int
    name: str
    color: str


class SessionTopic(CamelModel):
    """Topic as embedded in a session."""

    id: int
    name: str


class SessionResponse(CamelModel):
    """Response schema for study session."""

    id: int
    user_id: int
    subject_id: int
    topic_id: Optional[int] = None
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    status: SessionStatus
    focus_score: Optional[int] = None
    notes: Optional[str] = None
    subject: Optional[SessionSubject] = None
    topic: Optional[SessionTopic] = None
    created_at: datetime
    updated_at: datetime


class SessionEnvelope(CamelModel):
    """Single session envelope for reads."""

    session: SessionResponse


class SessionMessageEnvelope(SessionEnvelope):
    """Single session envelope for writes."""

    message: str


class SessionListResponse(CamelModel):
    """Filtered list of the caller's sessions."""

    sessions: list[SessionResponse]
    total: int


class SessionStats(CamelModel):
    """Aggregate statistics over the caller's sessions."""

    total_sessions: int
    completed_sessions: int
    missed_sessions: int
    in_progress_sessions: int
    scheduled_sessions: int
    total_hours_studied: float
    average_focus_score: float
    completion_rate: int = Field(description="Completed sessions, percent")


class SessionStatsResponse(CamelModel):
    """Session statistics envelope."""

    stats: SessionStats
