"""Topic and subtopic commands and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from igo import validation
from igo.schemas import CamelModel, CommandModel


# --- Commands ---


class TopicCreate(CommandModel):
    title: str = Field(None, validate_default=True)
    category: str = Field(None, validate_default=True)
    notes: str = ""
    urls: list[str] = []
    money_per_5_reps: float = Field(None, validate_default=True)
    is_money_per_5_reps_locked: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Title is required and must be a non-empty string")

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Category is required and must be a non-empty string")

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, v: Any) -> str:
        return validation.notes(v)

    @field_validator("urls", mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> list[str]:
        return validation.urls(v)

    @field_validator("money_per_5_reps", mode="before")
    @classmethod
    def check_money(cls, v: Any) -> float:
        return validation.money_per_5_reps(v)

    @field_validator("is_money_per_5_reps_locked", mode="before")
    @classmethod
    def coerce_locked(cls, v: Any) -> bool:
        return bool(v)


class TopicUpdate(CommandModel):
    """Partial update; validators only run for fields present in the request."""

    title: str | None = None
    category: str | None = None
    notes: str | None = None
    urls: list[str] | None = None
    money_per_5_reps: float | None = None
    is_money_per_5_reps_locked: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Title must be a non-empty string")

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Category must be a non-empty string")

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, v: Any) -> str:
        return validation.notes(v)

    @field_validator("urls", mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> list[str]:
        return validation.urls(v)

    @field_validator("money_per_5_reps", mode="before")
    @classmethod
    def check_money(cls, v: Any) -> float:
        return validation.money_per_5_reps(v)

    @field_validator("is_money_per_5_reps_locked", mode="before")
    @classmethod
    def coerce_locked(cls, v: Any) -> bool:
        return bool(v)


class SubtopicCreate(CommandModel):
    title: str = Field(None, validate_default=True)
    goal_amount: float = Field(None, validate_default=True)
    notes: str = ""
    urls: list[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Title is required and must be a non-empty string")

    @field_validator("goal_amount", mode="before")
    @classmethod
    def check_goal_amount(cls, v: Any) -> float:
        return validation.goal_amount(v)

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, v: Any) -> str:
        return validation.notes(v)

    @field_validator("urls", mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> list[str]:
        return validation.urls(v)


class SubtopicUpdate(CommandModel):
    title: str | None = None
    notes: str | None = None
    urls: list[str] | None = None
    goal_amount: float | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        return validation.non_empty_string(v, "Title must be a non-empty string")

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, v: Any) -> str:
        return validation.notes(v)

    @field_validator("urls", mode="before")
    @classmethod
    def check_urls(cls, v: Any) -> list[str]:
        return validation.urls(v)

    @field_validator("goal_amount", mode="before")
    @classmethod
    def check_goal_amount(cls, v: Any) -> float:
        return validation.goal_amount(v)


class RepsAdjustment(CommandModel):
    """Reps may be negative (subtracts); the counter is clamped by the tracker."""

    reps: int = Field(None, validate_default=True)

    @field_validator("reps", mode="before")
    @classmethod
    def check_reps(cls, v: Any) -> int:
        if not validation.is_number(v):
            raise ValueError("reps must be a number")
        if not validation.is_whole_number(v):
            raise ValueError("reps must be a whole number")
        return int(v)


# --- Responses ---


class SubtopicResponse(CamelModel):
    id: str
    topic_id: str
    title: str
    reps_completed: int
    reps_goal: int
    notes: str
    urls: list[str]
    goal_amount: float
    milestone_earnings: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TopicResponse(CamelModel):
    id: str
    title: str
    category: str
    earnings: float
    completion_percentage: float
    notes: str
    urls: list[str]
    money_per_5_reps: float
    is_money_per_5_reps_locked: bool
    subtopics: list[SubtopicResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubtopicCreatedResponse(CamelModel):
    sub_topic: SubtopicResponse
    updated_topic: TopicResponse


class RepsUpdatedResponse(CamelModel):
    updated_subtopic: SubtopicResponse
    updated_topic: TopicResponse


class SubtopicDeletedResponse(CamelModel):
    updated_topic: TopicResponse
