"""Topic and subtopic endpoints: /api/topics, /api/sub-topics, /api/categories."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from igo.calculations import subtopic_milestone_earnings
from igo.database import get_session
from igo.db.models import Subtopic, Topic
from igo.topics import service
from igo.topics.schemas import (
    RepsAdjustment,
    RepsUpdatedResponse,
    SubtopicCreate,
    SubtopicCreatedResponse,
    SubtopicDeletedResponse,
    SubtopicResponse,
    SubtopicUpdate,
    TopicCreate,
    TopicResponse,
    TopicUpdate,
)

router = APIRouter(prefix="/api", tags=["Topics"])


def _subtopic_response(subtopic: Subtopic) -> SubtopicResponse:
    return SubtopicResponse(
        id=subtopic.id,
        topic_id=subtopic.topic_id,
        title=subtopic.title,
        reps_completed=subtopic.reps_completed,
        reps_goal=subtopic.reps_goal,
        notes=subtopic.notes,
        urls=subtopic.urls or [],
        goal_amount=subtopic.goal_amount,
        milestone_earnings=subtopic_milestone_earnings(subtopic.reps_completed, subtopic.goal_amount),
        created_at=subtopic.created_at,
        updated_at=subtopic.updated_at,
    )


def _topic_response(topic: Topic, subtopics: list[Subtopic] | None = None) -> TopicResponse:
    return TopicResponse(
        id=topic.id,
        title=topic.title,
        category=topic.category,
        earnings=topic.earnings,
        completion_percentage=topic.completion_percentage,
        notes=topic.notes,
        urls=topic.urls or [],
        money_per_5_reps=topic.money_per_5_reps,
        is_money_per_5_reps_locked=topic.is_money_per_5_reps_locked,
        subtopics=[_subtopic_response(s) for s in subtopics or []],
        created_at=topic.created_at,
        updated_at=topic.updated_at,
    )


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


@router.get("/topics", response_model=list[TopicResponse])
async def list_topics(db: AsyncSession = Depends(get_session)) -> list[TopicResponse]:
    """All topics with their subtopics, as stored."""
    topics = await service.list_topics(db)
    return [_topic_response(t, await service.list_subtopics(db, t.id)) for t in topics]


@router.post("/topics", response_model=TopicResponse, status_code=201)
async def create_topic(
    command: TopicCreate,
    db: AsyncSession = Depends(get_session),
) -> TopicResponse:
    topic = await service.create_topic(db, command)
    await db.commit()
    return _topic_response(topic, [])


@router.get("/topics/{topic_id}", response_model=TopicResponse)
async def get_topic(
    topic_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> TopicResponse:
    """Fetch a topic; earnings and completion are recomputed and saved first."""
    topic, subtopics = await service.read_topic(db, str(topic_id))
    await db.commit()
    return _topic_response(topic, subtopics)


@router.put("/topics/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: uuid.UUID,
    command: TopicUpdate,
    db: AsyncSession = Depends(get_session),
) -> TopicResponse:
    topic, subtopics = await service.update_topic(db, str(topic_id), command)
    await db.commit()
    return _topic_response(topic, subtopics)


@router.post("/topics/{topic_id}/sub-topics", response_model=SubtopicCreatedResponse, status_code=201)
async def create_subtopic(
    topic_id: uuid.UUID,
    command: SubtopicCreate,
    db: AsyncSession = Depends(get_session),
) -> SubtopicCreatedResponse:
    subtopic, topic, subtopics = await service.create_subtopic(db, str(topic_id), command)
    await db.commit()
    return SubtopicCreatedResponse(
        sub_topic=_subtopic_response(subtopic),
        updated_topic=_topic_response(topic, subtopics),
    )


@router.get("/categories", response_model=list[str])
async def list_categories(db: AsyncSession = Depends(get_session)) -> list[str]:
    """Distinct topic categories, sorted."""
    return await service.get_unique_categories(db)


# ---------------------------------------------------------------------------
# Subtopics
# ---------------------------------------------------------------------------


@router.get("/sub-topics/{subtopic_id}", response_model=SubtopicResponse)
async def get_subtopic(
    subtopic_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> SubtopicResponse:
    subtopic = await service.get_subtopic_or_404(db, str(subtopic_id))
    return _subtopic_response(subtopic)


@router.put("/sub-topics/{subtopic_id}", response_model=SubtopicResponse)
async def update_subtopic(
    subtopic_id: uuid.UUID,
    command: SubtopicUpdate,
    db: AsyncSession = Depends(get_session),
) -> SubtopicResponse:
    subtopic = await service.update_subtopic(db, str(subtopic_id), command)
    await db.commit()
    return _subtopic_response(subtopic)


@router.delete("/sub-topics/{subtopic_id}", response_model=SubtopicDeletedResponse)
async def delete_subtopic(
    subtopic_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
) -> SubtopicDeletedResponse:
    topic, subtopics = await service.delete_subtopic(db, str(subtopic_id))
    await db.commit()
    return SubtopicDeletedResponse(updated_topic=_topic_response(topic, subtopics))


@router.post("/sub-topics/{subtopic_id}/reps", response_model=RepsUpdatedResponse)
async def add_reps(
    subtopic_id: uuid.UUID,
    adjustment: RepsAdjustment,
    db: AsyncSession = Depends(get_session),
) -> RepsUpdatedResponse:
    """Add (or, with a negative value, remove) reps; the counter never drops below 0."""
    subtopic, topic, subtopics = await service.adjust_subtopic_reps(db, str(subtopic_id), adjustment.reps)
    await db.commit()
    return RepsUpdatedResponse(
        updated_subtopic=_subtopic_response(subtopic),
        updated_topic=_topic_response(topic, subtopics),
    )
