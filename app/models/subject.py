"""Subject and prerequisite models."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from app.models.topic import Topic

from sqlalchemy import Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel
from app.utils.column_types import UTCDateTime
from app.utils.rounding import percentage

DEFAULT_COLOR = "#3B82F6"


class Prerequisite(BaseModel):
    """Directed edge: ``subject_id`` requires ``prerequisite_subject_id`` first.

    Attributes:
        subject_id: Dependent subject
        prerequisite_subject_id: Subject that should be studied first
    """

    __tablename__ = "prerequisites"

    subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    prerequisite_subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "subject_id",
            "prerequisite_subject_id",
            name="uq_prerequisite_subject_pair",
        ),
    )

    def __repr__(self) -> str:
        """String representation of the edge."""
        return (
            f"Prerequisite(subject_id={self.subject_id}, "
            f"prerequisite_subject_id={self.prerequisite_subject_id})"
        )


class Subject(BaseModel):
    """A learning goal owned by one user.

    ``hours_completed`` grows as study sessions are completed (and can be
    written directly by clients that track topic work themselves).
    ``progress`` is derived on every access and never stored.

    Attributes:
        user_id: Owning user
        name: Subject name
        difficulty_level: 1 (easy) to 5 (hard)
        total_hours_required: Hour target, always > 0
        hours_completed: Hours studied so far, >= 0
        deadline: Optional due date
        color: UI color tag
        topics: Ordered topics (loaded explicitly by services)
        prerequisites: Subjects this one depends on (read-only view)
    """

    __tablename__ = "subjects"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    difficulty_level: Mapped[int] = mapped_column(Integer, nullable=False)
    total_hours_required: Mapped[float] = mapped_column(Float, nullable=False)
    hours_completed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    deadline: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, default=None
    )
    color: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_COLOR
    )

    topics: Mapped[List["Topic"]] = relationship(
        "Topic",
        lazy="noload",
        order_by="Topic.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    prerequisites: Mapped[List["Subject"]] = relationship(
        "Subject",
        secondary="prerequisites",
        primaryjoin="Subject.id == Prerequisite.subject_id",
        secondaryjoin="Subject.id == Prerequisite.prerequisite_subject_id",
        lazy="noload",
        viewonly=True,
    )

    @property
    def progress(self) -> int:
        """Percent of required hours completed (not clamped to 100)."""
        return percentage(self.hours_completed or 0.0, self.total_hours_required)

    @property
    def topic_count(self) -> int:
        """Number of loaded topics."""
        return len(self.topics)

    def __repr__(self) -> str:
        """String representation of the subject."""
        return (
            f"Subject(id={self.id}, name={self.name!r}, "
            f"difficulty_level={self.difficulty_level})"
        )
