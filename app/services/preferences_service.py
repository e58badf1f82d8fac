"""Preferences service: one settings row per user, created lazily."""

import logging
from typing import Any

from sqlalchemy import select

from app.exceptions import InvalidInputError
from app.models.preferences import (
    DEFAULT_PREFERENCES,
    STUDY_TIMES,
    LearningPace,
    UserPreferences,
)
from app.services.base import BaseService

logger = logging.getLogger(__name__)

# field -> (low, high, message)
_RANGES = {
    "study_hours_per_day": (
        0.5,
        24,
        "Study hours per day must be between 0.5 and 24",
    ),
    "break_duration": (5, 60, "Break duration must be between 5 and 60 minutes"),
    "max_continuous_study": (
        15,
        240,
        "Max continuous study must be between 15 and 240 minutes",
    ),
}


def validate_preferences_patch(patch: dict[str, Any]) -> dict[str, Any]:
    """Check every present field before anything is written.

    Args:
        patch: snake_case field -> value, only fields sent by the client.

    Returns:
        The patch with ``learning_pace`` converted to LearningPace.

    Raises:
        InvalidInputError: On the first field out of range or not allowed.
    """
    cleaned = dict(patch)

    for field, (low, high, message) in _RANGES.items():
        if field not in cleaned:
            continue
        value = cleaned[field]
        if value is None or not low <= value <= high:
            raise InvalidInputError(message)

    if "learning_pace" in cleaned:
        try:
            cleaned["learning_pace"] = LearningPace(cleaned["learning_pace"])
        except ValueError as e:
            raise InvalidInputError(
                "Learning pace must be SLOW, MEDIUM, or FAST"
            ) from e

    if "preferred_study_times" in cleaned:
        times = cleaned["preferred_study_times"]
        if not isinstance(times, list):
            raise InvalidInputError("Preferred study times must be an array")
        invalid = [str(t) for t in times if t not in STUDY_TIMES]
        if invalid:
            raise InvalidInputError("Invalid study time(s): " + ", ".join(invalid))

    return cleaned


class PreferencesService(BaseService[UserPreferences]):
    """Service for the caller's study preferences.

    Every operation is an upsert keyed by user id, so a user never ends up
    with more than one row.
    """

    model = UserPreferences

    async def _get_for_user(self, user_id: int):
        result = await self.db.execute(
            select(UserPreferences).where(UserPreferences.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: int) -> UserPreferences:
        """Return the caller's preferences, creating defaults if absent."""
        preferences = await self._get_for_user(user_id)
        if preferences is not None:
            return preferences

        async with self.transaction("create"):
            preferences = UserPreferences(user_id=user_id)
            self.db.add(preferences)
            await self.db.flush()
        logger.debug("Created default preferences", extra={"user_id": user_id})
        return preferences

    async def update_preferences(
        self, user_id: int, patch: dict[str, Any]
    ) -> UserPreferences:
        """Validate and apply a partial patch (upsert).

        Raises:
            InvalidInputError: If any present field is invalid; nothing is written.
        """
        changes = validate_preferences_patch(patch)
        async with self.transaction("update"):
            preferences = await self._get_for_user(user_id)
            if preferences is None:
                preferences = UserPreferences(user_id=user_id, **changes)
                self.db.add(preferences)
            else:
                self.apply_changes(preferences, changes)
            await self.db.flush()
        logger.debug(
            "Updated preferences",
            extra={"user_id": user_id, "fields": sorted(changes)},
        )
        return preferences

    async def reset(self, user_id: int) -> UserPreferences:
        """Restore the default settings (upsert)."""
        defaults = dict(DEFAULT_PREFERENCES, preferred_study_times=[])
        async with self.transaction("reset"):
            preferences = await self._get_for_user(user_id)
            if preferences is None:
                preferences = UserPreferences(user_id=user_id, **defaults)
                self.db.add(preferences)
            else:
                self.apply_changes(preferences, defaults)
            await self.db.flush()
        logger.debug("Reset preferences", extra={"user_id": user_id})
        return preferences
