"""Base model class with primary key and timestamp tracking."""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from app.utils.column_types import UTCDateTime
from app.utils.db import Base
from app.utils.timeutils import utcnow


class BaseModel(Base):
    """Abstract base class for SQLAlchemy models.

    Provides common columns for all models:
    - Primary key (id)
    - Timestamps (created_at, updated_at)

    Timestamps are set on the Python side as well as by the server so that
    instances never carry expired attributes after a flush; async sessions
    cannot lazy-load them back.

    Persistence operations live in the service layer (see
    ``app.services.base.BaseService``).

    Usage:
        class Topic(BaseModel):
            __tablename__ = "topics"

            name: Mapped[str] = mapped_column(String(255))
    """

    __abstract__ = True  # This is an abstract base class

    # Primary key - all models will have an id column
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Timestamps - automatically managed
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model instance to dictionary.

        Returns:
            Dictionary representation of the model's columns
        """
        return {
            column.key: getattr(self, column.key) for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        """String representation of the model."""
        attrs = ", ".join(
            f"{key}={repr(value)}"
            for key, value in self.to_dict().items()
            if key != "id"
        )
        return f"{self.__class__.__name__}(id={self.id}, {attrs})"
