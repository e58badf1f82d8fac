"""Subjects API endpoints."""

from fastapi import APIRouter, Depends
from fastapi import status as http_status

from app.schemas.base import MessageResponse
from app.schemas.subject import (
    SessionSummary,
    SubjectCreate,
    SubjectDetailEnvelope,
    SubjectDetailResponse,
    SubjectEnvelope,
    SubjectListResponse,
    SubjectResponse,
    SubjectStats,
    SubjectStatsResponse,
    SubjectUpdate,
)
from app.services.subject_service import SubjectService
from app.utils.dependencies import dependencies, get_current_user_id

router = APIRouter(
    prefix="/subjects",
    tags=["Subjects"],
)


@router.get("")
async def list_subjects(
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> SubjectListResponse:
    """List the caller's subjects, newest first."""
    subjects = await service.list_subjects(user_id)
    return SubjectListResponse(
        subjects=[SubjectResponse.model_validate(s) for s in subjects],
        total=len(subjects),
    )


@router.post("", status_code=http_status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> SubjectEnvelope:
    """Create a subject together with its prerequisite links.

    Raises:
        InvalidInputError: If difficulty or total hours are out of range.
        RelatedRecordNotFoundError: If a prerequisite is not the caller's.
    """
    subject = await service.create_subject(user_id, **data.model_dump())
    return SubjectEnvelope(
        message="Subject created successfully",
        subject=SubjectResponse.model_validate(subject),
    )


@router.get("/stats")
async def get_subject_stats(
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> SubjectStatsResponse:
    """Hours, progress, difficulty buckets and deadlines due this week."""
    stats = await service.get_stats(user_id)
    return SubjectStatsResponse(stats=SubjectStats.model_validate(stats))


@router.get("/{subject_id}")
async def get_subject(
    subject_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> SubjectDetailEnvelope:
    """Get a subject with prerequisite progress, topics and recent sessions."""
    subject, sessions = await service.get_subject(user_id, subject_id)
    detail = SubjectDetailResponse.model_validate(subject)
    detail.recent_sessions = [SessionSummary.model_validate(s) for s in sessions]
    return SubjectDetailEnvelope(subject=detail)


@router.put("/{subject_id}")
async def update_subject(
    subject_id: int,
    data: SubjectUpdate,
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> SubjectEnvelope:
    """Partially update a subject; ``prerequisiteIds`` replaces the set.

    Raises:
        PrerequisiteCycleError: If the new prerequisites would form a cycle.
    """
    subject = await service.update_subject(
        user_id, subject_id, data.model_dump(exclude_unset=True)
    )
    return SubjectEnvelope(
        message="Subject updated successfully",
        subject=SubjectResponse.model_validate(subject),
    )


@router.delete("/{subject_id}")
async def delete_subject(
    subject_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SubjectService = Depends(dependencies.subject),
) -> MessageResponse:
    """Delete a subject with its topics, sessions and prerequisite links."""
    await service.delete_owned(subject_id, user_id)
    return MessageResponse(message="Subject deleted successfully")
