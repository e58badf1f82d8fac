"""Topic schemas for API request/response models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from app.schemas.base import CamelModel


class TopicCreate(CamelModel):
    """Schema for creating a topic; order defaults to the next free slot."""

    subject_id: int
    name: str = Field(..., min_length=1, max_length=255)
    estimated_hours: float
    order: Optional[int] = None


class TopicBulkItem(CamelModel):
    """One topic inside a bulk-create request."""

    name: str = Field(..., min_length=1, max_length=255)
    estimated_hours: float


class TopicBulkCreate(CamelModel):
    """Bulk topic creation payload."""

    subject_id: int
    topics: list[TopicBulkItem]


class TopicUpdate(CamelModel):
    """Partial topic patch."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    estimated_hours: Optional[float] = None
    is_completed: Optional[bool] = None
    order: Optional[int] = None


class TopicReorder(CamelModel):
    """New topic order: ids in their desired sequence.

    Typed loosely so a non-list is reported with its own message.
    """

    topic_ids: Any = None


class TopicResponse(CamelModel):
    """Response schema for topic."""

    id: int
    subject_id: int
    name: str
    estimated_hours: float
    is_completed: bool
    order: int
    created_at: datetime
    updated_at: datetime


class TopicEnvelope(CamelModel):
    """Single topic envelope for reads."""

    topic: TopicResponse


class TopicMessageEnvelope(TopicEnvelope):
    """Single topic envelope for writes."""

    message: str


class TopicCompletionStats(CamelModel):
    """Completion summary for a subject's topics."""

    total: int
    completed: int
    completion_percentage: int


class TopicListResponse(CamelModel):
    """Topics of a subject in order, with completion summary."""

    topics: list[TopicResponse]
    stats: TopicCompletionStats


class TopicListMessageResponse(CamelModel):
    """Topics of a subject returned by bulk writes."""

    message: str
    topics: list[TopicResponse]
