"""UTC time helpers shared by models and services."""

from datetime import datetime, timedelta, timezone

ONE_HOUR = timedelta(hours=1)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC.

    Naive values are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_hours(start: datetime, end: datetime) -> float:
    """Hours between two instants (negative if end precedes start)."""
    return (to_utc(end) - to_utc(start)) / ONE_HOUR
