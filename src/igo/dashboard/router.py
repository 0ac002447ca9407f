"""Dashboard endpoints: topic earnings overview and activity overview."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from igo.dashboard import service
from igo.dashboard.schemas import (
    ActivityDashboardResponse,
    ActivitySummaryEntry,
    GlobalGoalResponse,
    GlobalGoalUpdate,
    TopicDashboardResponse,
)
from igo.database import get_session

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=TopicDashboardResponse)
async def topic_dashboard(db: AsyncSession = Depends(get_session)) -> TopicDashboardResponse:
    """Global goal, current earnings and per-topic summaries."""
    data = await service.get_topic_dashboard(db)
    await db.commit()
    return TopicDashboardResponse.model_validate(data)


@router.put("/global-goal", response_model=GlobalGoalResponse)
async def update_global_goal(
    command: GlobalGoalUpdate,
    db: AsyncSession = Depends(get_session),
) -> GlobalGoalResponse:
    data = await service.update_global_goal(db, command.global_goal)
    await db.commit()
    return GlobalGoalResponse.model_validate(data)


@router.get("/activities", response_model=ActivityDashboardResponse)
async def activity_dashboard() -> ActivityDashboardResponse:
    """Activity totals, per-activity progress and recent sessions."""
    data = await service.get_activity_dashboard()
    return ActivityDashboardResponse.model_validate(data)


@router.get("/activities/summary", response_model=list[ActivitySummaryEntry])
async def activity_summary(db: AsyncSession = Depends(get_session)) -> list[ActivitySummaryEntry]:
    entries = await service.get_activity_summary(db)
    return [ActivitySummaryEntry.model_validate(e) for e in entries]
