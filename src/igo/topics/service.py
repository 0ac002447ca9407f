"""Topic and subtopic tracking.

Earnings and completion are denormalized onto the topic row. Every path
that changes what they depend on (and every topic read) goes through
``recompute_topic`` so stored values never drift from the subtopics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from igo.calculations import topic_completion, topic_earnings
from igo.db.models import REPS_GOAL, Subtopic, Topic
from igo.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from igo.topics.schemas import SubtopicCreate, SubtopicUpdate, TopicCreate, TopicUpdate

logger = structlog.get_logger()


async def get_topic_or_404(db: AsyncSession, topic_id: str) -> Topic:
    topic = await db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")
    return topic


async def get_subtopic_or_404(db: AsyncSession, subtopic_id: str) -> Subtopic:
    subtopic = await db.get(Subtopic, subtopic_id)
    if subtopic is None:
        raise NotFoundError("Subtopic not found")
    return subtopic


async def list_subtopics(db: AsyncSession, topic_id: str) -> list[Subtopic]:
    result = await db.execute(
        select(Subtopic)
        .where(Subtopic.topic_id == topic_id)
        .order_by(Subtopic.created_at, Subtopic.id)
    )
    return list(result.scalars().all())


async def recompute_topic(
    db: AsyncSession,
    topic: Topic,
    subtopics: list[Subtopic] | None = None,
) -> list[Subtopic]:
    """Recalculate earnings/completion from the subtopics and persist them.

    Returns the subtopic list the values were computed from.
    """
    if subtopics is None:
        subtopics = await list_subtopics(db, topic.id)
    topic.earnings = topic_earnings(subtopics, topic.money_per_5_reps)
    topic.completion_percentage = topic_completion(subtopics)
    await db.flush()
    return subtopics


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


async def list_topics(db: AsyncSession) -> list[Topic]:
    result = await db.execute(select(Topic).order_by(Topic.created_at, Topic.id))
    return list(result.scalars().all())


async def create_topic(db: AsyncSession, command: TopicCreate) -> Topic:
    """Insert a topic with zeroed derived fields."""
    topic = Topic(
        title=command.title,
        category=command.category,
        notes=command.notes,
        urls=command.urls,
        money_per_5_reps=command.money_per_5_reps,
        is_money_per_5_reps_locked=command.is_money_per_5_reps_locked,
        earnings=0,
        completion_percentage=0,
    )
    db.add(topic)
    await db.flush()
    logger.info("topic_created", topic_id=topic.id, category=topic.category)
    return topic


async def read_topic(db: AsyncSession, topic_id: str) -> tuple[Topic, list[Subtopic]]:
    """Fetch a topic with freshly recomputed (and re-saved) derived values."""
    topic = await get_topic_or_404(db, topic_id)
    subtopics = await recompute_topic(db, topic)
    return topic, subtopics


async def update_topic(
    db: AsyncSession,
    topic_id: str,
    command: TopicUpdate,
) -> tuple[Topic, list[Subtopic]]:
    """Apply a partial update, then recompute from the current subtopics."""
    topic = await get_topic_or_404(db, topic_id)
    for field, value in command.model_dump(exclude_unset=True).items():
        setattr(topic, field, value)
    subtopics = await recompute_topic(db, topic)
    return topic, subtopics


async def get_unique_categories(db: AsyncSession) -> list[str]:
    result = await db.execute(select(Topic.category).distinct())
    return sorted(set(result.scalars().all()))


# ---------------------------------------------------------------------------
# Subtopics
# ---------------------------------------------------------------------------


async def create_subtopic(
    db: AsyncSession,
    topic_id: str,
    command: SubtopicCreate,
) -> tuple[Subtopic, Topic, list[Subtopic]]:
    """Add a subtopic (0 reps, goal 18) and recompute its topic."""
    topic = await get_topic_or_404(db, topic_id)
    subtopic = Subtopic(
        topic_id=topic.id,
        title=command.title,
        notes=command.notes,
        urls=command.urls,
        goal_amount=command.goal_amount,
        reps_completed=0,
        reps_goal=REPS_GOAL,
    )
    db.add(subtopic)
    await db.flush()

    subtopics = await recompute_topic(db, topic)
    logger.info("subtopic_created", topic_id=topic.id, subtopic_id=subtopic.id)
    return subtopic, topic, subtopics


async def update_subtopic(
    db: AsyncSession,
    subtopic_id: str,
    command: SubtopicUpdate,
) -> Subtopic:
    """Partial update. The parent topic is recomputed on its next read or reps change."""
    subtopic = await get_subtopic_or_404(db, subtopic_id)
    for field, value in command.model_dump(exclude_unset=True).items():
        setattr(subtopic, field, value)
    await db.flush()
    return subtopic


async def adjust_subtopic_reps(
    db: AsyncSession,
    subtopic_id: str,
    delta: int,
) -> tuple[Subtopic, Topic, list[Subtopic]]:
    """Add (or subtract) reps, clamping at zero, then recompute the topic."""
    subtopic = await get_subtopic_or_404(db, subtopic_id)
    subtopic.reps_completed = max(0, subtopic.reps_completed + delta)
    await db.flush()

    topic = await get_topic_or_404(db, subtopic.topic_id)
    subtopics = await recompute_topic(db, topic)
    logger.info(
        "subtopic_reps_adjusted",
        subtopic_id=subtopic.id,
        delta=delta,
        reps_completed=subtopic.reps_completed,
    )
    return subtopic, topic, subtopics


async def delete_subtopic(db: AsyncSession, subtopic_id: str) -> tuple[Topic, list[Subtopic]]:
    """Remove a subtopic and recompute the topic that owned it."""
    subtopic = await get_subtopic_or_404(db, subtopic_id)
    topic = await get_topic_or_404(db, subtopic.topic_id)
    await db.delete(subtopic)
    await db.flush()

    subtopics = await recompute_topic(db, topic)
    logger.info("subtopic_deleted", topic_id=topic.id, subtopic_id=subtopic_id)
    return topic, subtopics
