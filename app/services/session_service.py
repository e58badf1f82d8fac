"""Study session service: scheduling, lifecycle and statistics.

Completing a session is the server-side path that feeds subject hours:
the elapsed actual time is added to ``Subject.hours_completed`` with one
SQL increment inside the same transaction as the status change.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from app.exceptions import (
    InvalidInputError,
    InvalidSessionTransitionError,
    RecordNotFoundError,
)
from app.models.study_session import SessionStatus, StudySession
from app.models.subject import Subject
from app.models.topic import Topic
from app.services.base import BaseService
from app.utils.rounding import percentage, round_half_up
from app.utils.timeutils import elapsed_hours, to_utc, utcnow

logger = logging.getLogger(__name__)

_DATETIME_FIELDS = ("scheduled_start", "scheduled_end", "actual_start", "actual_end")
# Fields that accept an explicit null in an update
_NULLABLE_FIELDS = ("actual_start", "actual_end", "focus_score", "notes")


def validate_focus_score(score: Any) -> None:
    if score is not None and not 1 <= score <= 10:
        raise InvalidInputError("Focus score must be between 1 and 10")


@dataclass
class SessionStats:
    """Aggregates over one user's sessions."""

    total_sessions: int
    completed_sessions: int
    missed_sessions: int
    in_progress_sessions: int
    scheduled_sessions: int
    total_hours_studied: float
    average_focus_score: float
    completion_rate: int


class SessionService(BaseService[StudySession]):
    """Service for the caller's study sessions.

    State machine: SCHEDULED --start--> IN_PROGRESS --complete--> COMPLETED.
    MISSED is only reachable through ``update_session``. A COMPLETED session
    can be neither started nor completed again, so its hours are counted once.

    Attributes:
        model: StudySession model class
        db: Database session for operations
    """

    model = StudySession

    @property
    def model_name(self) -> str:
        return "Session"

    def _with_relations(self):
        return select(StudySession).options(
            selectinload(StudySession.subject),
            selectinload(StudySession.topic),
        )

    async def load(self, session_id: int) -> StudySession:
        """Fetch a session with subject and topic freshly loaded."""
        result = await self.db.execute(
            self._with_relations()
            .where(StudySession.id == session_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def create_session(
        self,
        user_id: int,
        subject_id: int,
        scheduled_start: datetime,
        scheduled_end: datetime,
        topic_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> StudySession:
        """Schedule a session for one of the caller's subjects.

        Raises:
            RecordNotFoundError: If the subject is not the caller's, or the
                topic does not belong to that subject.
            InvalidInputError: If the scheduled end is not after the start.
        """
        subject = await self.db.execute(
            select(Subject.id).where(
                Subject.id == subject_id, Subject.user_id == user_id
            )
        )
        if subject.scalar_one_or_none() is None:
            raise RecordNotFoundError("Subject", subject_id)

        if topic_id is not None:
            topic = await self.db.execute(
                select(Topic.id).where(
                    Topic.id == topic_id, Topic.subject_id == subject_id
                )
            )
            if topic.scalar_one_or_none() is None:
                raise RecordNotFoundError("Topic", topic_id)

        start, end = to_utc(scheduled_start), to_utc(scheduled_end)
        if end <= start:
            raise InvalidInputError("Scheduled end must be after scheduled start")

        async with self.transaction("create"):
            session = StudySession(
                user_id=user_id,
                subject_id=subject_id,
                topic_id=topic_id,
                scheduled_start=start,
                scheduled_end=end,
                notes=notes or None,
            )
            self.db.add(session)
            await self.db.flush()

        logger.debug(
            "Created StudySession",
            extra={"model": "StudySession", "id": session.id, "user_id": user_id},
        )
        return await self.load(session.id)

    async def list_sessions(
        self,
        user_id: int,
        status: Optional[SessionStatus] = None,
        subject_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[StudySession]:
        """The caller's sessions, newest scheduled start first.

        ``start_date``/``end_date`` bound ``scheduled_start`` inclusively.
        """
        query = self._with_relations().where(StudySession.user_id == user_id)
        if status is not None:
            query = query.where(StudySession.status == status)
        if subject_id is not None:
            query = query.where(StudySession.subject_id == subject_id)
        if start_date is not None:
            query = query.where(StudySession.scheduled_start >= to_utc(start_date))
        if end_date is not None:
            query = query.where(StudySession.scheduled_start <= to_utc(end_date))

        result = await self.db.execute(
            query.order_by(StudySession.scheduled_start.desc(), StudySession.id.desc())
        )
        return list(result.scalars().all())

    async def get_session(self, user_id: int, session_id: int) -> StudySession:
        """Owned session with subject and topic.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
        """
        await self.get_owned_or_fail(session_id, user_id)
        return await self.load(session_id)

    async def update_session(
        self, user_id: int, session_id: int, patch: dict[str, Any]
    ) -> StudySession:
        """Apply an arbitrary partial patch, including a direct status change.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
            InvalidInputError: If the focus score is out of range,
                or the resulting actual end precedes the actual start.
        """
        session = await self.get_owned_or_fail(session_id, user_id)

        changes = {
            key: value
            for key, value in patch.items()
            if value is not None or key in _NULLABLE_FIELDS
        }
        validate_focus_score(changes.get("focus_score"))
        for key in _DATETIME_FIELDS:
            if changes.get(key) is not None:
                changes[key] = to_utc(changes[key])

        actual_start = changes.get("actual_start", session.actual_start)
        actual_end = changes.get("actual_end", session.actual_end)
        if actual_start is not None and actual_end is not None:
            if to_utc(actual_end) < to_utc(actual_start):
                raise InvalidInputError("Actual end must not be before actual start")

        async with self.transaction("update"):
            self.apply_changes(session, changes)
            await self.db.flush()

        logger.debug(
            "Updated StudySession",
            extra={"model": "StudySession", "id": session_id, "fields": sorted(changes)},
        )
        return await self.load(session_id)

    async def start_session(self, user_id: int, session_id: int) -> StudySession:
        """Mark the session IN_PROGRESS and stamp ``actual_start`` with now.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
            InvalidSessionTransitionError: If the session is already COMPLETED.
        """
        session = await self.get_owned_or_fail(session_id, user_id)
        if session.status == SessionStatus.COMPLETED:
            raise InvalidSessionTransitionError(
                session_id, session.status.value, "start"
            )

        async with self.transaction("start"):
            session.status = SessionStatus.IN_PROGRESS
            session.actual_start = utcnow()
            await self.db.flush()

        logger.info(
            "Session started", extra={"session_id": session_id, "user_id": user_id}
        )
        return await self.load(session_id)

    async def complete_session(
        self,
        user_id: int,
        session_id: int,
        focus_score: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> StudySession:
        """Mark the session COMPLETED and credit its duration to the subject.

        ``actual_end`` is set to now. When ``actual_start`` is also present,
        ``(actual_end - actual_start)`` hours are added to the subject's
        ``hours_completed`` via an atomic increment in the same transaction.
        The status change is a conditional UPDATE, so of two concurrent
        completions only one credits hours.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
            InvalidInputError: If the focus score is out of range, or
                ``actual_start`` lies after the completion time.
            InvalidSessionTransitionError: If the session is already COMPLETED.
        """
        session = await self.get_owned_or_fail(session_id, user_id)
        validate_focus_score(focus_score)
        if session.status == SessionStatus.COMPLETED:
            raise InvalidSessionTransitionError(
                session_id, session.status.value, "complete"
            )

        now = utcnow()
        values: dict[str, Any] = {
            "status": SessionStatus.COMPLETED,
            "actual_end": now,
            "focus_score": focus_score,
        }
        if notes:
            values["notes"] = notes

        hours = 0.0
        async with self.transaction("complete"):
            current = await self.db.execute(
                select(StudySession.actual_start, StudySession.subject_id).where(
                    StudySession.id == session_id
                )
            )
            actual_start, subject_id = current.one()
            if actual_start is not None:
                hours = elapsed_hours(actual_start, now)
                if hours < 0:
                    raise InvalidInputError(
                        "Actual end must not be before actual start"
                    )

            result = await self.db.execute(
                update(StudySession)
                .where(
                    StudySession.id == session_id,
                    StudySession.status != SessionStatus.COMPLETED,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise InvalidSessionTransitionError(
                    session_id, SessionStatus.COMPLETED.value, "complete"
                )

            if hours:
                await self.db.execute(
                    update(Subject)
                    .where(Subject.id == subject_id)
                    .values(hours_completed=Subject.hours_completed + hours)
                    .execution_options(synchronize_session=False)
                )

        logger.info(
            "Session completed",
            extra={"session_id": session_id, "user_id": user_id, "hours": hours},
        )
        return await self.load(session_id)

    async def get_stats(self, user_id: int) -> SessionStats:
        """Counts per status, hours studied, mean focus and completion rate."""
        sessions = await self.find(user_id=user_id)

        def count(status: SessionStatus) -> int:
            return sum(1 for s in sessions if s.status == status)

        total = len(sessions)
        completed = count(SessionStatus.COMPLETED)
        missed = count(SessionStatus.MISSED)
        in_progress = count(SessionStatus.IN_PROGRESS)

        hours = sum(
            elapsed_hours(s.actual_start, s.actual_end)
            for s in sessions
            if s.actual_start is not None and s.actual_end is not None
        )
        scores = [s.focus_score for s in sessions if s.focus_score is not None]
        average_focus = sum(scores) / len(scores) if scores else 0.0

        return SessionStats(
            total_sessions=total,
            completed_sessions=completed,
            missed_sessions=missed,
            in_progress_sessions=in_progress,
            scheduled_sessions=total - completed - missed - in_progress,
            total_hours_studied=round_half_up(hours, 1),
            average_focus_score=round_half_up(average_focus, 1),
            completion_rate=percentage(completed, total),
        )
