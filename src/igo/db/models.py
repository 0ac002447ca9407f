"""ORM models for topics, activities and the focus challenge.

Tables are created by Alembic (see alembic/versions). Column types stay
portable (generic JSON with a JSONB variant, generic Uuid) so the same
metadata can build a throwaway SQLite schema for tests.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from igo.db.base import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")

REPS_GOAL = 18


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


class Topic(Base):
    """A study topic converting completed subtopic reps into money."""

    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    urls: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    money_per_5_reps: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    is_money_per_5_reps_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    earnings: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    completion_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class Subtopic(Base):
    """A subtopic with an 18-rep goal and a milestone amount."""

    __tablename__ = "subtopics"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    topic_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    urls: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    reps_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reps_goal: Mapped[int] = mapped_column(Integer, nullable=False, default=REPS_GOAL)
    goal_amount: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class GlobalSetting(Base):
    """Singleton key/value settings (e.g. global_goal)."""

    __tablename__ = "global_settings"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


class Activity(Base):
    """A trackable habit with period goals and an optional timer session."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    goals: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    # Ending a session on a time-based activity credits its minutes as reps
    is_time_based: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class ActivitySession(Base):
    """A manual or timer session. At most one active per activity."""

    __tablename__ = "activity_sessions"
    __table_args__ = (
        Index(
            "uq_activity_sessions_one_active",
            "activity_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    activity_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    session_type: Mapped[str] = mapped_column(String(16), nullable=False, default="manual")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


# ---------------------------------------------------------------------------
# Motivational challenge
# ---------------------------------------------------------------------------


class Challenge(Base):
    """A 64-day focus-hours commitment. At most one is active."""

    __tablename__ = "motivational_challenges"
    __table_args__ = (
        Index(
            "uq_motivational_challenges_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ultimate_focus_goal_hours: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class DailyQuote(Base):
    """Motivational quote pool for the daily quote rotation."""

    __tablename__ = "daily_motivational_quotes"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    quote_text: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ChallengeProgress(Base):
    """One row per (challenge, calendar day)."""

    __tablename__ = "challenge_progress"
    __table_args__ = (
        UniqueConstraint("challenge_id", "progress_date", name="uq_challenge_progress_challenge_date"),
    )

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    challenge_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("motivational_challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    progress_date: Mapped[date] = mapped_column(Date, nullable=False)
    daily_focus_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    countdown_seconds_remaining: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    daily_quote_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("daily_motivational_quotes.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active_period: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_countdown_update: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
