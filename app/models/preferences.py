"""User study preferences model."""

import enum
from typing import List

from sqlalchemy import JSON, Enum, Float, ForeignKey, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class LearningPace(str, enum.Enum):
    """Self-reported learning pace."""

    SLOW = "SLOW"
    MEDIUM = "MEDIUM"
    FAST = "FAST"


STUDY_TIMES = ("morning", "afternoon", "evening", "night")

DEFAULT_PREFERENCES = {
    "study_hours_per_day": 4.0,
    "preferred_study_times": [],
    "break_duration": 15,
    "max_continuous_study": 90,
    "learning_pace": LearningPace.MEDIUM,
}


class UserPreferences(BaseModel):
    """Per-user study settings, at most one row per user.

    Attributes:
        user_id: Owning user (unique)
        study_hours_per_day: Daily target, 0.5-24 hours
        preferred_study_times: Subset of morning/afternoon/evening/night
        break_duration: Break length in minutes, 5-60
        max_continuous_study: Longest study stretch in minutes, 15-240
        learning_pace: SLOW, MEDIUM or FAST
    """

    __tablename__ = "user_preferences"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    study_hours_per_day: Mapped[float] = mapped_column(
        Float, nullable=False, default=DEFAULT_PREFERENCES["study_hours_per_day"]
    )
    preferred_study_times: Mapped[List[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )
    break_duration: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_PREFERENCES["break_duration"]
    )
    max_continuous_study: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_PREFERENCES["max_continuous_study"]
    )
    learning_pace: Mapped[LearningPace] = mapped_column(
        Enum(LearningPace, native_enum=False, length=20),
        nullable=False,
        default=LearningPace.MEDIUM,
    )

    def __repr__(self) -> str:
        """String representation of the preferences."""
        return (
            f"UserPreferences(user_id={self.user_id}, "
            f"hours={self.study_hours_per_day}, pace={self.learning_pace.value})"
        )
