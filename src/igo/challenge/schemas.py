"""Challenge, countdown and quote schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator

from igo import validation
from igo.schemas import CamelModel, CommandModel


class ChallengeCreate(CommandModel):
    ultimate_focus_goal_hours: float = Field(None, validate_default=True)

    @field_validator("ultimate_focus_goal_hours", mode="before")
    @classmethod
    def check_hours(cls, v: Any) -> float:
        return validation.positive_number(v, "Ultimate focus goal hours must be a positive number")


class ChallengeResponse(CamelModel):
    id: str
    start_date: datetime
    end_date: datetime
    ultimate_focus_goal_hours: float
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuoteResponse(CamelModel):
    quote_text: str
    author: str | None = None
    category: str | None = None


class ProgressResponse(CamelModel):
    id: str
    challenge_id: str
    progress_date: date
    daily_focus_minutes: int
    countdown_seconds_remaining: int
    daily_quote_id: str | None = None
    daily_quote: QuoteResponse | None = None
    is_active_period: bool
    last_countdown_update: datetime | None = None


class CurrentChallengeResponse(CamelModel):
    challenge: ChallengeResponse
    progress: ProgressResponse
    is_active_period: bool


class CountdownSyncResponse(CamelModel):
    server_time: datetime
    daily_seconds_remaining: int
    total_seconds_remaining: int
    is_active_hours: bool
    current_hour: int
    days_remaining: int


class TimerStatusResponse(CamelModel):
    server_time: datetime
    server_timestamp: int
    daily_seconds_remaining: int
    daily_milliseconds_remaining: int
    total_seconds_remaining: int
    total_days_remaining: int
    is_active_hours: bool
    current_hour: int
    current_minute: int
    current_second: int
    current_millisecond: int
    active_hours_start: int
    active_hours_end: int


class ChallengeStats(CamelModel):
    total_focus_hours: int
    total_focus_minutes: int
    ultimate_goal_hours: float
    progress_percentage: float
    days_active: int
    days_remaining: int
    current_countdown_seconds: int
    average_daily_minutes: int


class ChallengeStatsResponse(CamelModel):
    challenge: ChallengeResponse
    stats: ChallengeStats
    daily_progress: list[ProgressResponse]
