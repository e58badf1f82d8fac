"""Preferences schemas."""

from datetime import datetime
from typing import Any, Optional

from app.models.preferences import LearningPace
from app.schemas.base import CamelModel


class PreferencesUpdate(CamelModel):
    """Partial preferences patch.

    Values are range/enum checked by the preferences service so that each
    field reports its own message; only JSON types are enforced here.
    """

    study_hours_per_day: Optional[float] = None
    preferred_study_times: Optional[Any] = None
    break_duration: Optional[int] = None
    max_continuous_study: Optional[int] = None
    learning_pace: Optional[str] = None


class PreferencesResponse(CamelModel):
    """Stored preferences row."""

    id: int
    user_id: int
    study_hours_per_day: float
    preferred_study_times: list[str]
    break_duration: int
    max_continuous_study: int
    learning_pace: LearningPace
    created_at: datetime
    updated_at: datetime


class PreferencesEnvelope(CamelModel):
    """Preferences response envelope."""

    preferences: PreferencesResponse


class PreferencesMessageEnvelope(PreferencesEnvelope):
    """Preferences envelope returned by writes."""

    message: str
