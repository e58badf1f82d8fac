"""Preferences API endpoints."""

from fastapi import APIRouter, Depends

from app.schemas.preferences import (
    PreferencesEnvelope,
    PreferencesMessageEnvelope,
    PreferencesResponse,
    PreferencesUpdate,
)
from app.services.preferences_service import PreferencesService
from app.utils.dependencies import dependencies, get_current_user_id

router = APIRouter(
    prefix="/preferences",
    tags=["Preferences"],
)


@router.get("")
async def get_preferences(
    user_id: int = Depends(get_current_user_id),
    service: PreferencesService = Depends(dependencies.preferences),
) -> PreferencesEnvelope:
    """Return the caller's preferences, creating defaults on first access."""
    preferences = await service.get_or_create(user_id)
    return PreferencesEnvelope(
        preferences=PreferencesResponse.model_validate(preferences)
    )


@router.put("")
async def update_preferences(
    data: PreferencesUpdate,
    user_id: int = Depends(get_current_user_id),
    service: PreferencesService = Depends(dependencies.preferences),
) -> PreferencesMessageEnvelope:
    """Validate and apply a partial update.

    Raises:
        InvalidInputError: If any present field is invalid; nothing is saved.
    """
    preferences = await service.update_preferences(
        user_id, data.model_dump(exclude_unset=True)
    )
    return PreferencesMessageEnvelope(
        message="Preferences updated successfully",
        preferences=PreferencesResponse.model_validate(preferences),
    )


@router.post("/reset")
async def reset_preferences(
    user_id: int = Depends(get_current_user_id),
    service: PreferencesService = Depends(dependencies.preferences),
) -> PreferencesMessageEnvelope:
    """Restore the default preferences."""
    preferences = await service.reset(user_id)
    return PreferencesMessageEnvelope(
        message="Preferences reset to default",
        preferences=PreferencesResponse.model_validate(preferences),
    )
