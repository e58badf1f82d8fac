"""Topic model: ordered sub-units of a subject."""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class Topic(BaseModel):
    """Ordered unit of work inside a subject.

    ``order`` is unique per subject in practice (services keep it that
    way) but not enforced by the database.

    Attributes:
        subject_id: Parent subject
        name: Topic name
        estimated_hours: Estimated effort, always > 0
        is_completed: Completion flag
        order: 1-based position within the subject
    """

    __tablename__ = "topics"

    subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    estimated_hours: Mapped[float] = mapped_column(Float, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        """String representation of the topic."""
        return (
            f"Topic(id={self.id}, subject_id={self.subject_id}, "
            f"name={self.name!r}, order={self.order})"
        )
