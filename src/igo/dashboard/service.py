"""Dashboard aggregation for the topic earnings view and the activity view.

The activity dashboard fans out independent reads, each on its own session,
and joins them with ``asyncio.gather``; any failed read fails the whole
aggregate.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from igo.activities import service as activity_service
from igo.calculations import dashboard_progress, round_half_up, topic_earnings, total_earnings
from igo.config import get_settings
from igo.database import session_scope
from igo.db.models import GlobalSetting
from igo.topics import service as topic_service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

GLOBAL_GOAL_KEY = "global_goal"
RECENT_SESSIONS_LIMIT = 10


async def get_global_goal(db: AsyncSession) -> float:
    """Stored global goal, falling back to the configured default when unset or zero."""
    result = await db.execute(select(GlobalSetting.value).where(GlobalSetting.key == GLOBAL_GOAL_KEY))
    value = result.scalar_one_or_none()
    return value or get_settings().default_global_goal


async def set_global_goal(db: AsyncSession, goal: float) -> None:
    result = await db.execute(select(GlobalSetting).where(GlobalSetting.key == GLOBAL_GOAL_KEY))
    setting = result.scalar_one_or_none()
    if setting is None:
        db.add(GlobalSetting(key=GLOBAL_GOAL_KEY, value=goal))
    else:
        setting.value = goal
    await db.flush()


# ---------------------------------------------------------------------------
# Topic dashboard
# ---------------------------------------------------------------------------


async def get_topic_dashboard(db: AsyncSession) -> dict[str, Any]:
    """Global goal, per-topic earnings (recomputed and saved) and overall progress."""
    goal = await get_global_goal(db)
    topics = await topic_service.list_topics(db)

    summaries = []
    for topic in topics:
        await topic_service.recompute_topic(db, topic)
        summaries.append(
            {
                "id": topic.id,
                "title": topic.title,
                "category": topic.category,
                "earnings": topic.earnings,
                "completion_percentage": topic.completion_percentage,
            }
        )

    current = total_earnings(topics)
    return {
        "global_goal": goal,
        "current_earnings": current,
        "progress": dashboard_progress(current, goal),
        "topics": summaries,
    }


async def update_global_goal(db: AsyncSession, goal: float) -> dict[str, Any]:
    """Store a new goal and report progress against it.

    Earnings are computed fresh from the subtopics but not written back.
    """
    await set_global_goal(db, goal)

    current = 0.0
    for topic in await topic_service.list_topics(db):
        subtopics = await topic_service.list_subtopics(db, topic.id)
        current += topic_earnings(subtopics, topic.money_per_5_reps)

    logger.info("global_goal_updated", global_goal=goal)
    return {
        "global_goal": goal,
        "current_earnings": current,
        "progress": dashboard_progress(current, goal),
    }


# ---------------------------------------------------------------------------
# Activity dashboard
# ---------------------------------------------------------------------------


async def _read_activities():
    async with session_scope() as db:
        return await activity_service.list_activities(db)


async def _read_active_session_count() -> int:
    async with session_scope() as db:
        return await activity_service.count_active_sessions(db)


async def _read_recent_sessions():
    async with session_scope() as db:
        return await activity_service.list_recent_sessions(db, RECENT_SESSIONS_LIMIT)


async def get_activity_dashboard() -> dict[str, Any]:
    activities, active_sessions, recent_sessions = await asyncio.gather(
        _read_activities(),
        _read_active_session_count(),
        _read_recent_sessions(),
    )
    progress = [activity_service.build_progress(a) for a in activities]

    total_reps = sum(a.reps for a in activities)
    total_daily_targets = sum(p["daily_progress"]["target"] for p in progress)
    completion_rate = total_reps * 100 / total_daily_targets if total_daily_targets > 0 else 0

    return {
        "stats": {
            "total_activities": len(activities),
            "total_reps_today": total_reps,
            "active_sessions": active_sessions,
            "completion_rate": round_half_up(completion_rate, 2),
        },
        "activities": activities,
        "progress": progress,
        "recent_sessions": recent_sessions,
    }


async def get_activity_summary(db: AsyncSession) -> list[dict[str, Any]]:
    """Minimal per-activity view with an integer daily percentage."""
    summary = []
    for activity in await activity_service.list_activities(db):
        daily = (activity.goals or {}).get("daily", 0) or 0
        summary.append(
            {
                "id": activity.id,
                "name": activity.name,
                "current_reps": activity.reps,
                "daily_goal": daily,
                "progress_percentage": round_half_up(activity.reps * 100 / daily) if daily > 0 else 0,
            }
        )
    return summary
