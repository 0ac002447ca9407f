"""Activity, session, progress and timer schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator

from igo import validation
from igo.schemas import CamelModel, CommandModel

SessionType = Literal["manual", "timer"]

# Activities with these names count their session minutes as reps and focus time
TIME_BASED_NAMES = ("Focus Hour", "FOCUSSED TIME")


class ActivityGoals(CamelModel):
    daily: float = 0
    weekly: float = 0
    monthly: float = 0
    yearly: float = 0


# --- Commands ---


class ActivityCreate(CommandModel):
    name: str = Field(None, validate_default=True)
    goals: ActivityGoals = Field(default_factory=ActivityGoals)
    is_time_based: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Activity name is required")

    @field_validator("goals", mode="before")
    @classmethod
    def check_goals(cls, v: Any) -> dict[str, float]:
        if v is None:
            return {}
        return validation.goal_targets(v)

    @field_validator("is_time_based", mode="before")
    @classmethod
    def coerce_time_based(cls, v: Any) -> bool:
        return bool(v)

    @model_validator(mode="after")
    def default_time_based(self) -> ActivityCreate:
        if "is_time_based" not in self.model_fields_set and self.name in TIME_BASED_NAMES:
            self.is_time_based = True
        return self


class ActivityUpdate(CommandModel):
    """Partial update. ``goals`` holds only the period targets that were sent."""

    name: str | None = None
    reps: int | None = None
    goals: dict[str, float] | None = None
    is_time_based: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Activity name must be a non-empty string")

    @field_validator("reps", mode="before")
    @classmethod
    def check_reps(cls, v: Any) -> int:
        if not validation.is_whole_number(v) or v < 0:
            raise ValueError("reps must be a non-negative whole number")
        return int(v)

    @field_validator("goals", mode="before")
    @classmethod
    def check_goals(cls, v: Any) -> dict[str, float]:
        return validation.goal_targets(v)

    @field_validator("is_time_based", mode="before")
    @classmethod
    def coerce_time_based(cls, v: Any) -> bool:
        return bool(v)


class RepsAmount(CommandModel):
    """Increment/decrement step. Missing, null or 0 means 1."""

    amount: int = 1

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v: Any) -> int:
        if not v:
            return 1
        if not validation.is_whole_number(v) or v < 0:
            raise ValueError("amount must be a positive whole number")
        return int(v)


class SessionStart(CommandModel):
    session_type: SessionType = "timer"

    @field_validator("session_type", mode="before")
    @classmethod
    def check_session_type(cls, v: Any) -> str:
        session_type = v or "timer"
        if session_type not in validation.SESSION_TYPES:
            raise ValueError("sessionType must be 'manual' or 'timer'")
        return session_type


# --- Responses ---


class ActivityResponse(CamelModel):
    id: str
    name: str
    reps: int
    goals: ActivityGoals
    is_time_based: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SessionResponse(CamelModel):
    id: str
    activity_id: str
    start_time: datetime
    end_time: datetime | None = None
    duration_minutes: int
    is_active: bool
    session_type: SessionType
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PeriodProgress(CamelModel):
    current: int
    target: float
    percentage: float
    remaining: float


class ActivityProgressResponse(CamelModel):
    activity: ActivityResponse
    daily_progress: PeriodProgress
    weekly_progress: PeriodProgress
    monthly_progress: PeriodProgress
    yearly_progress: PeriodProgress
    time_remaining_today: int  # minutes until local midnight


class TimerStatusResponse(CamelModel):
    session: SessionResponse
    elapsed_minutes: int
    elapsed_seconds: int
    elapsed_milliseconds: int
    is_running: bool
    start_time: datetime
    server_time: datetime
