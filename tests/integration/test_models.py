"""Integration tests for model constraints, cascades and column types."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    Prerequisite,
    StudySession,
    Subject,
    Topic,
    User,
    UserPreferences,
)


async def _subject(db: AsyncSession, user: User, name: str = "Algebra") -> Subject:
    subject = Subject(
        user_id=user.id, name=name, difficulty_level=2, total_hours_required=5.0
    )
    db.add(subject)
    await db.flush()
    return subject


class TestConstraints:
    @pytest.mark.asyncio
    async def test_email_must_be_unique(self, db_session: AsyncSession, user):
        with pytest.raises(IntegrityError):
            db_session.add(
                User(email=user.email, password_hash="y", full_name="Copy")
            )
            await db_session.flush()

    @pytest.mark.asyncio
    async def test_one_preferences_row_per_user(self, db_session: AsyncSession, user):
        db_session.add(UserPreferences(user_id=user.id))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            db_session.add(UserPreferences(user_id=user.id))
            await db_session.flush()

    @pytest.mark.asyncio
    async def test_prerequisite_pair_unique(self, db_session: AsyncSession, user):
        a = await _subject(db_session, user, "A")
        b = await _subject(db_session, user, "B")
        db_session.add(Prerequisite(subject_id=b.id, prerequisite_subject_id=a.id))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            db_session.add(Prerequisite(subject_id=b.id, prerequisite_subject_id=a.id))
            await db_session.flush()


class TestCascades:
    @pytest.mark.asyncio
    async def test_deleting_topic_nulls_session_topic(
        self, db_session: AsyncSession, user
    ):
        subject = await _subject(db_session, user)
        topic = Topic(subject_id=subject.id, name="t", estimated_hours=1.0, order=1)
        db_session.add(topic)
        await db_session.flush()
        now = datetime.now(timezone.utc)
        session = StudySession(
            user_id=user.id,
            subject_id=subject.id,
            topic_id=topic.id,
            scheduled_start=now,
            scheduled_end=now + timedelta(hours=1),
        )
        db_session.add(session)
        await db_session.commit()

        await db_session.delete(topic)
        await db_session.commit()

        result = await db_session.execute(
            select(StudySession.topic_id).where(StudySession.id == session.id)
        )
        assert result.scalar_one() is None

    @pytest.mark.asyncio
    async def test_deleting_user_removes_owned_rows(
        self, db_session: AsyncSession, user
    ):
        a = await _subject(db_session, user, "A")
        b = await _subject(db_session, user, "B")
        db_session.add(Prerequisite(subject_id=b.id, prerequisite_subject_id=a.id))
        db_session.add(UserPreferences(user_id=user.id))
        await db_session.commit()

        await db_session.delete(user)
        await db_session.commit()

        for model in (Subject, Prerequisite, UserPreferences):
            result = await db_session.execute(select(model))
            assert result.scalars().all() == []


class TestUTCDateTime:
    @pytest.mark.asyncio
    async def test_values_come_back_aware_utc(self, db_session: AsyncSession, user):
        plus_five = timezone(timedelta(hours=5))
        subject = await _subject(db_session, user)
        subject.deadline = datetime(2025, 6, 1, 17, 0, tzinfo=plus_five)
        await db_session.commit()

        result = await db_session.execute(
            select(Subject.deadline).where(Subject.id == subject.id)
        )
        deadline = result.scalar_one()

        assert deadline.tzinfo is not None
        assert deadline == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_timestamps_populated(self, db_session: AsyncSession, user):
        assert user.created_at.tzinfo is not None
        assert user.updated_at >= user.created_at
