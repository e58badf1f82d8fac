"""Study session model with its status lifecycle."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.models.subject import Subject
    from app.models.topic import Topic

from sqlalchemy import Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel
from app.utils.column_types import UTCDateTime


class SessionStatus(str, enum.Enum):
    """Study session status enumeration.

    Attributes:
        SCHEDULED: Planned, not started yet
        IN_PROGRESS: Started, actual_start is set
        COMPLETED: Finished, actual_end is set
        MISSED: Marked as missed by the user (update only)
    """

    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    MISSED = "MISSED"


class StudySession(BaseModel):
    """Scheduled (and possibly actual) study interval for a subject.

    Lifecycle: SCHEDULED -> IN_PROGRESS (start) -> COMPLETED (complete).
    Completing a session adds its actual duration to the subject's
    ``hours_completed``.

    Attributes:
        user_id: Owning user
        subject_id: Subject studied
        topic_id: Optional topic of the same subject
        scheduled_start: Planned start
        scheduled_end: Planned end, after scheduled_start
        actual_start: Set by start
        actual_end: Set by complete
        status: SessionStatus
        focus_score: Optional self-rating 1-10
        notes: Free text
    """

    __tablename__ = "study_sessions"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    topic_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("topics.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    scheduled_start: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, index=True
    )
    scheduled_end: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    actual_start: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, default=None
    )
    actual_end: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, default=None
    )

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False, length=20),
        nullable=False,
        index=True,
        default=SessionStatus.SCHEDULED,
    )
    focus_score: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=None
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    # Loaded explicitly with selectinload() by the session service
    subject: Mapped["Subject"] = relationship(
        "Subject", lazy="noload", foreign_keys=[subject_id]
    )
    topic: Mapped[Optional["Topic"]] = relationship(
        "Topic", lazy="noload", foreign_keys=[topic_id]
    )

    def __repr__(self) -> str:
        """String representation of the session."""
        return (
            f"StudySession(id={self.id}, subject_id={self.subject_id}, "
            f"status={self.status.value})"
        )
