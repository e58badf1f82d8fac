"""Subject service providing business logic for Subject model operations.

Subjects own their prerequisite edges and topics. Progress is derived
from stored hours on every read (see ``Subject.progress``); nothing here
caches it.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from app.exceptions import (
    InvalidInputError,
    PrerequisiteCycleError,
    RecordNotFoundError,
    RelatedRecordNotFoundError,
)
from app.models.study_session import StudySession
from app.models.subject import DEFAULT_COLOR, Prerequisite, Subject
from app.services.base import BaseService
from app.utils.rounding import percentage
from app.utils.timeutils import to_utc, utcnow

logger = logging.getLogger(__name__)

RECENT_SESSIONS_LIMIT = 10
UPCOMING_DEADLINE_WINDOW = timedelta(days=7)


def validate_difficulty(level: Any) -> None:
    if level is None or not 1 <= level <= 5:
        raise InvalidInputError("Difficulty level must be between 1 and 5")


def validate_total_hours(hours: Any) -> None:
    if hours is None or hours <= 0:
        raise InvalidInputError("Total hours must be greater than 0")


def find_cycle_edge(
    subject_id: int,
    prerequisite_ids: Iterable[int],
    edges: dict[int, set[int]],
) -> Optional[int]:
    """Return the first prerequisite that would make the graph cyclic.

    ``edges`` maps a subject id to the ids it requires, excluding the
    outgoing edges of ``subject_id`` that are being replaced. Adding
    ``subject_id -> p`` closes a cycle iff ``subject_id`` is reachable
    from ``p``.
    """
    for prerequisite_id in prerequisite_ids:
        if prerequisite_id == subject_id:
            return prerequisite_id
        stack = [prerequisite_id]
        seen = {prerequisite_id}
        while stack:
            current = stack.pop()
            for nxt in edges.get(current, ()):
                if nxt == subject_id:
                    return prerequisite_id
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
    return None


@dataclass
class DifficultyDistribution:
    easy: int = 0
    medium: int = 0
    hard: int = 0


@dataclass
class UpcomingDeadline:
    id: int
    name: str
    deadline: datetime


@dataclass
class SubjectStats:
    """Aggregates over one user's subjects."""

    total_subjects: int
    total_hours_required: float
    total_hours_completed: float
    overall_progress: int
    difficulty_distribution: DifficultyDistribution
    upcoming_deadlines: List[UpcomingDeadline] = field(default_factory=list)


class SubjectService(BaseService[Subject]):
    """Service for managing the caller's subjects.

    Provides, all scoped to the calling user:
    - create_subject(user_id, ...): Create subject with prerequisite edges
    - list_subjects(user_id): Subjects with prerequisites and topics
    - get_subject(user_id, id): Subject detail plus recent sessions
    - update_subject(user_id, id, patch): Partial update, optional
      prerequisite replacement
    - delete_owned(id, user_id): Delete (cascades in the database)
    - get_stats(user_id): Hours, progress, difficulty and deadline summary

    Attributes:
        model: Subject model class
        db: Database session for operations
    """

    model = Subject

    def _with_relations(self):
        return select(Subject).options(
            selectinload(Subject.prerequisites),
            selectinload(Subject.topics),
        )

    async def load(self, subject_id: int) -> Subject:
        """Fetch a subject with prerequisites and topics freshly loaded."""
        result = await self.db.execute(
            self._with_relations()
            .where(Subject.id == subject_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _validate_prerequisites(
        self, user_id: int, prerequisite_ids: List[int]
    ) -> List[int]:
        """Deduplicate ids and make sure each is one of the caller's subjects."""
        unique_ids = list(dict.fromkeys(prerequisite_ids))
        if not unique_ids:
            return unique_ids
        result = await self.db.execute(
            select(Subject.id).where(
                Subject.id.in_(unique_ids), Subject.user_id == user_id
            )
        )
        owned = set(result.scalars().all())
        for prerequisite_id in unique_ids:
            if prerequisite_id not in owned:
                raise RelatedRecordNotFoundError("prerequisiteIds", prerequisite_id)
        return unique_ids

    async def _prerequisite_graph(self, user_id: int, exclude: int) -> dict:
        """Adjacency of the caller's prerequisite edges, minus ``exclude``'s own."""
        result = await self.db.execute(
            select(Prerequisite.subject_id, Prerequisite.prerequisite_subject_id)
            .join(Subject, Subject.id == Prerequisite.subject_id)
            .where(Subject.user_id == user_id, Prerequisite.subject_id != exclude)
        )
        edges: dict[int, set[int]] = defaultdict(set)
        for subject_id, prerequisite_id in result.all():
            edges[subject_id].add(prerequisite_id)
        return edges

    async def create_subject(
        self,
        user_id: int,
        name: str,
        difficulty_level: int,
        total_hours_required: float,
        deadline: Optional[datetime] = None,
        color: Optional[str] = None,
        prerequisite_ids: Optional[List[int]] = None,
    ) -> Subject:
        """Create a subject and its prerequisite edges in one transaction.

        Raises:
            InvalidInputError: If difficulty or total hours are out of range.
            RelatedRecordNotFoundError: If a prerequisite is not the caller's.
        """
        validate_difficulty(difficulty_level)
        validate_total_hours(total_hours_required)
        prerequisite_ids = await self._validate_prerequisites(
            user_id, prerequisite_ids or []
        )

        async with self.transaction("create"):
            subject = Subject(
                user_id=user_id,
                name=name,
                difficulty_level=difficulty_level,
                total_hours_required=total_hours_required,
                hours_completed=0.0,
                deadline=to_utc(deadline) if deadline else None,
                color=color or DEFAULT_COLOR,
            )
            self.db.add(subject)
            await self.db.flush()
            self.db.add_all(
                Prerequisite(subject_id=subject.id, prerequisite_subject_id=p)
                for p in prerequisite_ids
            )
            await self.db.flush()

        logger.debug(
            "Created Subject",
            extra={"model": "Subject", "id": subject.id, "user_id": user_id},
        )
        return await self.load(subject.id)

    async def list_subjects(self, user_id: int) -> List[Subject]:
        """The caller's subjects, newest first, with prerequisites and topics."""
        result = await self.db.execute(
            self._with_relations()
            .where(Subject.user_id == user_id)
            .order_by(Subject.created_at.desc(), Subject.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_subject(
        self, user_id: int, subject_id: int
    ) -> tuple[Subject, List[StudySession]]:
        """Owned subject with relations plus its most recent sessions.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
        """
        result = await self.db.execute(
            self._with_relations()
            .where(Subject.id == subject_id, Subject.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        subject = result.scalar_one_or_none()
        if subject is None:
            raise RecordNotFoundError("Subject", subject_id)

        sessions = await self.db.execute(
            select(StudySession)
            .where(StudySession.subject_id == subject_id)
            .order_by(StudySession.scheduled_start.desc())
            .limit(RECENT_SESSIONS_LIMIT)
        )
        return subject, list(sessions.scalars().all())

    async def update_subject(
        self, user_id: int, subject_id: int, patch: dict[str, Any]
    ) -> Subject:
        """Apply a partial patch; ``prerequisite_ids`` replaces the whole set.

        Field changes and prerequisite replacement commit together.

        Raises:
            RecordNotFoundError: If absent or owned by another user.
            InvalidInputError: If a supplied value is out of range.
            RelatedRecordNotFoundError: If a prerequisite is not the caller's.
            PrerequisiteCycleError: If the new edges would form a cycle.
        """
        subject = await self.get_owned_or_fail(subject_id, user_id)

        changes = dict(patch)
        prerequisite_ids = changes.pop("prerequisite_ids", None)

        # Only deadline may be cleared with null
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key == "deadline"
        }
        if "difficulty_level" in changes:
            validate_difficulty(changes["difficulty_level"])
        if "total_hours_required" in changes:
            validate_total_hours(changes["total_hours_required"])
        if "hours_completed" in changes and changes["hours_completed"] < 0:
            raise InvalidInputError("Hours completed cannot be negative")
        if changes.get("deadline") is not None:
            changes["deadline"] = to_utc(changes["deadline"])

        if prerequisite_ids is not None:
            prerequisite_ids = await self._validate_prerequisites(
                user_id, prerequisite_ids
            )
            edges = await self._prerequisite_graph(user_id, exclude=subject_id)
            offending = find_cycle_edge(subject_id, prerequisite_ids, edges)
            if offending is not None:
                raise PrerequisiteCycleError(subject_id, offending)

        async with self.transaction("update"):
            self.apply_changes(subject, changes)
            if prerequisite_ids is not None:
                await self.db.execute(
                    delete(Prerequisite).where(Prerequisite.subject_id == subject_id)
                )
                self.db.add_all(
                    Prerequisite(subject_id=subject_id, prerequisite_subject_id=p)
                    for p in prerequisite_ids
                )
            await self.db.flush()

        logger.debug(
            "Updated Subject",
            extra={"model": "Subject", "id": subject_id, "user_id": user_id},
        )
        return await self.load(subject_id)

    async def get_stats(self, user_id: int) -> SubjectStats:
        """Aggregate hours, progress, difficulty buckets and near deadlines."""
        subjects = await self.find(user_id=user_id)

        total_required = sum(s.total_hours_required for s in subjects)
        total_completed = sum(s.hours_completed for s in subjects)

        distribution = DifficultyDistribution(
            easy=sum(1 for s in subjects if s.difficulty_level <= 2),
            medium=sum(1 for s in subjects if s.difficulty_level == 3),
            hard=sum(1 for s in subjects if s.difficulty_level >= 4),
        )

        now = utcnow()
        horizon = now + UPCOMING_DEADLINE_WINDOW
        upcoming = [
            UpcomingDeadline(id=s.id, name=s.name, deadline=s.deadline)
            for s in subjects
            if s.deadline is not None and now <= to_utc(s.deadline) <= horizon
        ]

        return SubjectStats(
            total_subjects=len(subjects),
            total_hours_required=total_required,
            total_hours_completed=total_completed,
            overall_progress=percentage(total_completed, total_required),
            difficulty_distribution=distribution,
            upcoming_deadlines=upcoming,
        )
