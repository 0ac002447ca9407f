"""Dashboard Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from igo import validation
from igo.activities.schemas import ActivityProgressResponse, ActivityResponse, SessionResponse
from igo.schemas import CamelModel, CommandModel


class GlobalGoalUpdate(CommandModel):
    global_goal: float = Field(None, validate_default=True)

    @field_validator("global_goal", mode="before")
    @classmethod
    def check_goal(cls, v: Any) -> float:
        return validation.positive_number(v, "globalGoal must be a positive number")


class TopicSummary(CamelModel):
    """One topic row on the earnings dashboard."""

    id: str
    title: str
    category: str
    earnings: float
    completion_percentage: float


class TopicDashboardResponse(CamelModel):
    global_goal: float
    current_earnings: float
    progress: float
    topics: list[TopicSummary]


class GlobalGoalResponse(CamelModel):
    global_goal: float
    current_earnings: float
    progress: float


class ActivityDashboardStats(CamelModel):
    total_activities: int
    total_reps_today: int
    active_sessions: int
    completion_rate: float


class ActivityDashboardResponse(CamelModel):
    stats: ActivityDashboardStats
    activities: list[ActivityResponse]
    progress: list[ActivityProgressResponse]
    recent_sessions: list[SessionResponse]


class ActivitySummaryEntry(CamelModel):
    id: str
    name: str
    current_reps: int
    daily_goal: float
    progress_percentage: int
