"""Business logic services package."""

from app.services.base import BaseService
from app.services.preferences_service import PreferencesService
from app.services.session_service import SessionService
from app.services.subject_service import SubjectService
from app.services.topic_service import TopicService
from app.services.user_service import UserService

__all__ = [
    "BaseService",
    "UserService",
    "PreferencesService",
    "SubjectService",
    "TopicService",
    "SessionService",
]
