"""Topics API endpoints."""

from fastapi import APIRouter, Depends
from fastapi import status as http_status

from app.schemas.base import MessageResponse
from app.schemas.topic import (
    TopicBulkCreate,
    TopicCompletionStats,
    TopicCreate,
    TopicEnvelope,
    TopicListMessageResponse,
    TopicListResponse,
    TopicMessageEnvelope,
    TopicReorder,
    TopicResponse,
    TopicUpdate,
)
from app.services.topic_service import TopicService
from app.utils.dependencies import dependencies, get_current_user_id

router = APIRouter(
    prefix="/topics",
    tags=["Topics"],
)


@router.post("", status_code=http_status.HTTP_201_CREATED)
async def create_topic(
    data: TopicCreate,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicMessageEnvelope:
    """Add a topic to one of the caller's subjects."""
    topic = await service.create_topic(
        user_id,
        subject_id=data.subject_id,
        name=data.name,
        estimated_hours=data.estimated_hours,
        order=data.order,
    )
    return TopicMessageEnvelope(
        message="Topic created successfully",
        topic=TopicResponse.model_validate(topic),
    )


@router.post("/bulk", status_code=http_status.HTTP_201_CREATED)
async def bulk_create_topics(
    data: TopicBulkCreate,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicListMessageResponse:
    """Append several topics after the subject's current last one."""
    created, topics = await service.bulk_create(
        user_id,
        data.subject_id,
        [item.model_dump() for item in data.topics],
    )
    return TopicListMessageResponse(
        message=f"{created} topics created successfully",
        topics=[TopicResponse.model_validate(t) for t in topics],
    )


@router.get("/subject/{subject_id}")
async def list_subject_topics(
    subject_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicListResponse:
    """Topics of a subject in study order with a completion summary."""
    topics, stats = await service.list_by_subject(user_id, subject_id)
    return TopicListResponse(
        topics=[TopicResponse.model_validate(t) for t in topics],
        stats=TopicCompletionStats.model_validate(stats),
    )


@router.put("/subject/{subject_id}/reorder")
async def reorder_topics(
    subject_id: int,
    data: TopicReorder,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicListMessageResponse:
    """Renumber topics following the given id sequence."""
    topics = await service.reorder(user_id, subject_id, data.topic_ids)
    return TopicListMessageResponse(
        message="Topics reordered successfully",
        topics=[TopicResponse.model_validate(t) for t in topics],
    )


@router.get("/{topic_id}")
async def get_topic(
    topic_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicEnvelope:
    """Get a topic of one of the caller's subjects."""
    topic = await service.get_owned_or_fail(topic_id, user_id)
    return TopicEnvelope(topic=TopicResponse.model_validate(topic))


@router.put("/{topic_id}")
async def update_topic(
    topic_id: int,
    data: TopicUpdate,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicMessageEnvelope:
    """Partially update a topic."""
    topic = await service.update_topic(
        user_id, topic_id, data.model_dump(exclude_unset=True)
    )
    return TopicMessageEnvelope(
        message="Topic updated successfully",
        topic=TopicResponse.model_validate(topic),
    )


@router.delete("/{topic_id}")
async def delete_topic(
    topic_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> MessageResponse:
    """Delete a topic; sessions pointing at it keep running without one."""
    await service.delete_owned(topic_id, user_id)
    return MessageResponse(message="Topic deleted successfully")


@router.patch("/{topic_id}/toggle")
async def toggle_topic(
    topic_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TopicService = Depends(dependencies.topic),
) -> TopicMessageEnvelope:
    """Flip the completion flag of a topic."""
    topic = await service.toggle_completion(user_id, topic_id)
    state = "completed" if topic.is_completed else "incomplete"
    return TopicMessageEnvelope(
        message=f"Topic marked as {state}",
        topic=TopicResponse.model_validate(topic),
    )
