"""Topic service: ordered topics scoped to a subject.

Ownership is transitive: a topic belongs to whoever owns its subject.
Lookups that fail the check raise the same RecordNotFoundError as a
missing topic.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from sqlalchemy import func, select, update

from app.exceptions import InvalidInputError, RecordNotFoundError
from app.models.subject import Subject
from app.models.topic import Topic
from app.services.base import BaseService
from app.utils.rounding import percentage

logger = logging.getLogger(__name__)


def validate_estimated_hours(hours: Any) -> None:
    if hours is None or hours <= 0:
        raise InvalidInputError("Estimated hours must be greater than 0")


@dataclass
class TopicCompletionStats:
    total: int
    completed: int
    completion_percentage: int


class TopicService(BaseService[Topic]):
    """Service for managing topics of the caller's subjects.

    Provides:
    - create_topic(user_id, subject_id, name, estimated_hours, order=None)
    - bulk_create(user_id, subject_id, items)
    - list_by_subject(user_id, subject_id)
    - get_owned_or_fail(id, user_id), update_topic, delete_owned
    - toggle_completion(user_id, id)
    - reorder(user_id, subject_id, topic_ids)

    Attributes:
        model: Topic model class
        db: Database session for operations
    """

    model = Topic

    async def get_owned(self, record_id: int, user_id: int) -> Optional[Topic]:
        """Topic whose subject belongs to ``user_id``, else None."""
        result = await self.db.execute(
            select(Topic, Subject.user_id)
            .join(Subject, Subject.id == Topic.subject_id)
            .where(Topic.id == record_id)
        )
        row = result.one_or_none()
        if row is None or row.user_id != user_id:
            return None
        return row.Topic

    async def _require_subject(self, user_id: int, subject_id: int) -> Subject:
        result = await self.db.execute(
            select(Subject).where(Subject.id == subject_id, Subject.user_id == user_id)
        )
        subject = result.scalar_one_or_none()
        if subject is None:
            raise RecordNotFoundError("Subject", subject_id)
        return subject

    async def _max_order(self, subject_id: int) -> int:
        result = await self.db.execute(
            select(func.max(Topic.order)).where(Topic.subject_id == subject_id)
        )
        return result.scalar_one() or 0

    async def _topics_of(self, subject_id: int) -> List[Topic]:
        result = await self.db.execute(
            select(Topic)
            .where(Topic.subject_id == subject_id)
            .order_by(Topic.order, Topic.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_topic(
        self,
        user_id: int,
        subject_id: int,
        name: str,
        estimated_hours: float,
        order: Optional[int] = None,
    ) -> Topic:
        """Create a topic; without ``order`` it goes after the current last one.

        Raises:
            InvalidInputError: If estimated hours or order are not positive.
            RecordNotFoundError: If the subject is absent or not the caller's.
        """
        validate_estimated_hours(estimated_hours)
        if order is not None and order < 1:
            raise InvalidInputError("Order must be a positive integer")
        await self._require_subject(user_id, subject_id)

        async with self.transaction("create"):
            if order is None:
                order = await self._max_order(subject_id) + 1
            topic = Topic(
                subject_id=subject_id,
                name=name,
                estimated_hours=estimated_hours,
                order=order,
            )
            self.db.add(topic)
            await self.db.flush()

        logger.debug(
            "Created Topic",
            extra={"model": "Topic", "id": topic.id, "subject_id": subject_id},
        )
        return topic

    async def bulk_create(
        self, user_id: int, subject_id: int, items: Sequence[dict[str, Any]]
    ) -> tuple[int, List[Topic]]:
        """Append topics in input order, numbering from the current maximum.

        All topics are written in one transaction.

        Args:
            items: Dicts with ``name`` and ``estimated_hours``.

        Returns:
            Number created and all topics of the subject, ordered.

        Raises:
            InvalidInputError: If the list is empty or an item is invalid.
            RecordNotFoundError: If the subject is absent or not the caller's.
        """
        if not items:
            raise InvalidInputError("Subject ID and topics array are required")
        for item in items:
            validate_estimated_hours(item.get("estimated_hours"))
        await self._require_subject(user_id, subject_id)

        async with self.transaction("bulk create"):
            current = await self._max_order(subject_id)
            for offset, item in enumerate(items, start=1):
                self.db.add(
                    Topic(
                        subject_id=subject_id,
                        name=item["name"],
                        estimated_hours=item["estimated_hours"],
                        order=current + offset,
                    )
                )
            await self.db.flush()

        logger.debug(
            "Bulk created topics",
            extra={"model": "Topic", "subject_id": subject_id, "count": len(items)},
        )
        return len(items), await self._topics_of(subject_id)

    async def list_by_subject(
        self, user_id: int, subject_id: int
    ) -> tuple[List[Topic], TopicCompletionStats]:
        """Topics ordered ascending with a completion summary.

        Raises:
            RecordNotFoundError: If the subject is absent or not the caller's.
        """
        await self._require_subject(user_id, subject_id)
        topics = await self._topics_of(subject_id)
        completed = sum(1 for t in topics if t.is_completed)
        stats = TopicCompletionStats(
            total=len(topics),
            completed=completed,
            completion_percentage=percentage(completed, len(topics)),
        )
        return topics, stats

    async def update_topic(
        self, user_id: int, topic_id: int, patch: dict[str, Any]
    ) -> Topic:
        """Apply a partial patch.

        Raises:
            RecordNotFoundError: If absent or not the caller's.
            InvalidInputError: If estimated hours or order are not positive.
        """
        topic = await self.get_owned_or_fail(topic_id, user_id)
        changes = {key: value for key, value in patch.items() if value is not None}
        if "estimated_hours" in changes:
            validate_estimated_hours(changes["estimated_hours"])
        if "order" in changes and changes["order"] < 1:
            raise InvalidInputError("Order must be a positive integer")

        async with self.transaction("update"):
            self.apply_changes(topic, changes)
            await self.db.flush()
        return topic

    async def toggle_completion(self, user_id: int, topic_id: int) -> Topic:
        """Flip the completion flag. Subject hours are left untouched."""
        topic = await self.get_owned_or_fail(topic_id, user_id)
        async with self.transaction("toggle"):
            topic.is_completed = not topic.is_completed
            await self.db.flush()
        logger.debug(
            "Toggled Topic",
            extra={"model": "Topic", "id": topic_id, "completed": topic.is_completed},
        )
        return topic

    async def reorder(
        self, user_id: int, subject_id: int, topic_ids: Any
    ) -> List[Topic]:
        """Set each listed topic's order to its 1-based position in ``topic_ids``.

        Positions are taken from the list as sent: entries that are not ids
        of this subject's topics are skipped without shifting the others,
        and a repeated id ends up at its last position. Topics not mentioned
        keep their order. All updates commit together.

        Raises:
            InvalidInputError: If ``topic_ids`` is not a list.
            RecordNotFoundError: If the subject is absent or not the caller's.
        """
        if not isinstance(topic_ids, list):
            raise InvalidInputError("Topic IDs array is required")
        await self._require_subject(user_id, subject_id)

        result = await self.db.execute(
            select(Topic.id).where(Topic.subject_id == subject_id)
        )
        own_ids = set(result.scalars().all())
        positions = {}
        for position, topic_id in enumerate(topic_ids, start=1):
            # JSON true/false would otherwise pass as ids 1/0
            if type(topic_id) is int and topic_id in own_ids:
                positions[topic_id] = position

        async with self.transaction("reorder"):
            for topic_id, position in positions.items():
                await self.db.execute(
                    update(Topic)
                    .where(Topic.id == topic_id, Topic.subject_id == subject_id)
                    .values(order=position)
                    .execution_options(synchronize_session=False)
                )

        logger.debug(
            "Reordered topics",
            extra={"model": "Topic", "subject_id": subject_id, "count": len(positions)},
        )
        return await self._topics_of(subject_id)
