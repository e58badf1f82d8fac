"""Pydantic schemas for API request/response models."""

from app.schemas.base import CamelModel, MessageResponse
from app.schemas.session import SessionResponse
from app.schemas.subject import SubjectDetailResponse, SubjectResponse
from app.schemas.topic import TopicResponse

__all__ = [
    "CamelModel",
    "MessageResponse",
    "SessionResponse",
    "SubjectResponse",
    "SubjectDetailResponse",
    "TopicResponse",
]
