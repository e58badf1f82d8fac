"""Subject schemas for API request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.study_session import SessionStatus
from app.schemas.base import CamelModel


class SubjectCreate(CamelModel):
    """Schema for creating a subject.

    Attributes:
        name: Name of the subject.
        difficulty_level: Difficulty 1-5 (range checked by the service).
        total_hours_required: Hour target, > 0 (checked by the service).
        deadline: Optional due date.
        color: Optional UI color tag.
        prerequisite_ids: Ids of the caller's subjects to study first.
    """

    name: str = Field(..., min_length=1, max_length=255)
    difficulty_level: int
    total_hours_required: float
    deadline: Optional[datetime] = None
    color: Optional[str] = Field(default=None, max_length=20)
    prerequisite_ids: list[int] = Field(default_factory=list)


class SubjectUpdate(CamelModel):
    """Partial subject patch. Only fields present in the request are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    difficulty_level: Optional[int] = None
    total_hours_required: Optional[float] = None
    hours_completed: Optional[float] = None
    deadline: Optional[datetime] = None
    color: Optional[str] = Field(default=None, max_length=20)
    prerequisite_ids: Optional[list[int]] = None


class SubjectRef(CamelModel):
    """Minimal subject reference."""

    id: int
    name: str


class PrerequisiteDetail(SubjectRef):
    """Prerequisite subject with its own progress."""

    hours_completed: float
    total_hours_required: float
    progress: int


class TopicSummary(CamelModel):
    """Topic as embedded in a subject."""

    id: int
    name: str
    estimated_hours: float
    is_completed: bool
    order: int


class SessionSummary(CamelModel):
    """Study session as embedded in a subject."""

    id: int
    scheduled_start: datetime
    scheduled_end: datetime
    status: SessionStatus


class SubjectResponse(CamelModel):
    """Response schema for subject with derived progress."""

    id: int
    user_id: int
    name: str
    difficulty_level: int
    total_hours_required: float
    hours_completed: float
    deadline: Optional[datetime] = None
    color: str
    progress: int
    topic_count: int = 0
    prerequisites: list[SubjectRef] = Field(default_factory=list)
    topics: list[TopicSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class SubjectDetailResponse(SubjectResponse):
    """Single-subject view including prerequisite progress and recent sessions."""

    prerequisites: list[PrerequisiteDetail] = Field(default_factory=list)
    recent_sessions: list[SessionSummary] = Field(default_factory=list)


class SubjectEnvelope(CamelModel):
    """Subject response envelope for writes."""

    message: str
    subject: SubjectResponse


class SubjectDetailEnvelope(CamelModel):
    """Subject response envelope for reads."""

    subject: SubjectDetailResponse


class SubjectListResponse(CamelModel):
    """List of the caller's subjects."""

    subjects: list[SubjectResponse]
    total: int


class DifficultyDistribution(CamelModel):
    """Subject counts per difficulty bucket."""

    easy: int
    medium: int
    hard: int


class UpcomingDeadline(CamelModel):
    """Subject due within the next week."""

    id: int
    name: str
    deadline: datetime


class SubjectStats(CamelModel):
    """Aggregate statistics over the caller's subjects."""

    total_subjects: int
    total_hours_required: float
    total_hours_completed: float
    overall_progress: int
    difficulty_distribution: DifficultyDistribution
    upcoming_deadlines: list[UpcomingDeadline]


class SubjectStatsResponse(CamelModel):
    """Subject statistics envelope."""

    stats: SubjectStats
