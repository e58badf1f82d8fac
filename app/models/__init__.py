"""Data models package."""

from app.exceptions import (
    DatabaseConnectionError,
    InvalidFilterError,
    ModelError,
    RecordNotFoundError,
)
from app.models.base import BaseModel
from app.models.preferences import LearningPace, UserPreferences
from app.models.study_session import SessionStatus, StudySession
from app.models.subject import Prerequisite, Subject
from app.models.topic import Topic
from app.models.user import User

__all__ = [
    "BaseModel",
    "ModelError",
    "RecordNotFoundError",
    "DatabaseConnectionError",
    "InvalidFilterError",
    "User",
    "UserPreferences",
    "LearningPace",
    "Subject",
    "Prerequisite",
    "Topic",
    "StudySession",
    "SessionStatus",
]
