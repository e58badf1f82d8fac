"""SQLAlchemy custom column types."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from app.utils.timeutils import to_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamp on every backend.

    PostgreSQL keeps the offset natively; SQLite drops it. Values are
    normalised to UTC before binding and naive results are re-tagged as
    UTC, so callers always see aware datetimes.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect):
        """Convert Python values to UTC before sending to database.

        Args:
            value: Naive (assumed UTC) or aware datetime, or None.
            dialect: SQLAlchemy dialect instance.

        Returns:
            UTC datetime or None.
        """
        if value is None:
            return None
        return to_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect):
        """Attach UTC to values read from the database.

        Args:
            value: Datetime returned by the driver or None.
            dialect: SQLAlchemy dialect instance.

        Returns:
            Aware UTC datetime or None.
        """
        if value is None:
            return None
        return to_utc(value)
