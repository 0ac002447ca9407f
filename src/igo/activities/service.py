"""Activity counters, period progress and timer sessions."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from igo.calculations import period_progress
from igo.challenge.service import record_focus_minutes
from igo.clock import elapsed_ms, to_local, utcnow
from igo.db.models import Activity, ActivitySession
from igo.errors import ConflictError, NotFoundError
from igo.validation import GOAL_PERIODS

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from igo.activities.schemas import ActivityCreate, ActivityUpdate

logger = structlog.get_logger()

_MS_PER_MINUTE = 60_000


def _goal(activity: Activity, period: str) -> float:
    return (activity.goals or {}).get(period, 0) or 0


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


async def list_activities(db: AsyncSession) -> list[Activity]:
    result = await db.execute(select(Activity).order_by(Activity.created_at, Activity.id))
    return list(result.scalars().all())


async def get_activity_or_404(db: AsyncSession, activity_id: str) -> Activity:
    activity = await db.get(Activity, activity_id)
    if activity is None:
        raise NotFoundError("Activity not found")
    return activity


async def _flush_unique_name(db: AsyncSession, name: str) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(f"An activity named '{name}' already exists") from e


async def create_activity(db: AsyncSession, command: ActivityCreate) -> Activity:
    activity = Activity(
        name=command.name,
        reps=0,
        goals=command.goals.model_dump(),
        is_time_based=command.is_time_based,
    )
    db.add(activity)
    await _flush_unique_name(db, command.name)
    logger.info("activity_created", activity_id=activity.id, is_time_based=activity.is_time_based)
    return activity


async def update_activity(db: AsyncSession, activity_id: str, command: ActivityUpdate) -> Activity:
    """Partial update; ``goals`` is merged period by period into the stored targets."""
    activity = await get_activity_or_404(db, activity_id)
    fields = command.model_dump(exclude_unset=True)

    goals = fields.pop("goals", None)
    if goals:
        activity.goals = {**(activity.goals or {}), **goals}
    for field, value in fields.items():
        setattr(activity, field, value)

    await _flush_unique_name(db, activity.name)
    return activity


async def delete_activity(db: AsyncSession, activity_id: str) -> None:
    activity = await get_activity_or_404(db, activity_id)
    await db.delete(activity)
    await db.flush()
    logger.info("activity_deleted", activity_id=activity_id)


async def increment_reps(db: AsyncSession, activity_id: str, amount: int = 1) -> Activity:
    activity = await get_activity_or_404(db, activity_id)
    activity.reps += amount
    await db.flush()
    return activity


async def decrement_reps(db: AsyncSession, activity_id: str, amount: int = 1) -> Activity:
    """Subtract reps; the counter never goes below zero."""
    activity = await get_activity_or_404(db, activity_id)
    activity.reps = max(0, activity.reps - amount)
    await db.flush()
    return activity


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


def minutes_until_local_midnight(now: datetime) -> int:
    local_now = to_local(now)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
    return max(0, elapsed_ms(local_now, midnight) // _MS_PER_MINUTE)


def build_progress(activity: Activity, now: datetime | None = None) -> dict[str, Any]:
    """Compare the rep counter against every period's target.

    All four periods measure the same counter; there is no per-period reset.
    """
    progress: dict[str, Any] = {"activity": activity}
    for period in GOAL_PERIODS:
        progress[f"{period}_progress"] = period_progress(activity.reps, _goal(activity, period))
    progress["time_remaining_today"] = minutes_until_local_midnight(now or utcnow())
    return progress


async def get_progress(
    db: AsyncSession,
    activity_id: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    activity = await get_activity_or_404(db, activity_id)
    return build_progress(activity, now)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


async def get_active_session(db: AsyncSession, activity_id: str) -> ActivitySession | None:
    result = await db.execute(
        select(ActivitySession).where(
            ActivitySession.activity_id == activity_id,
            ActivitySession.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def count_active_sessions(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(ActivitySession).where(ActivitySession.is_active.is_(True))
    )
    return result.scalar_one()


async def list_sessions(db: AsyncSession, activity_id: str, limit: int = 10) -> list[ActivitySession]:
    """Most recent sessions of one activity, newest first."""
    activity = await get_activity_or_404(db, activity_id)
    result = await db.execute(
        select(ActivitySession)
        .where(ActivitySession.activity_id == activity.id)
        .order_by(ActivitySession.start_time.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_recent_sessions(db: AsyncSession, limit: int = 10) -> list[ActivitySession]:
    result = await db.execute(
        select(ActivitySession).order_by(ActivitySession.start_time.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def start_session(
    db: AsyncSession,
    activity_id: str,
    session_type: str = "manual",
    now: datetime | None = None,
) -> ActivitySession:
    """Open a session. Fails if the activity already has one running, of any type."""
    activity = await get_activity_or_404(db, activity_id)
    if await get_active_session(db, activity.id) is not None:
        raise ConflictError("Activity already has an active session")

    session = ActivitySession(
        activity_id=activity.id,
        start_time=now or utcnow(),
        is_active=True,
        duration_minutes=0,
        session_type=session_type,
    )
    db.add(session)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost the race against a concurrent start; the partial unique index rejected it
        await db.rollback()
        raise ConflictError("Activity already has an active session") from e

    logger.info("session_started", activity_id=activity.id, session_id=session.id, session_type=session_type)
    return session


async def end_session(
    db: AsyncSession,
    activity_id: str,
    session_id: str,
    now: datetime | None = None,
) -> ActivitySession:
    """Close a running session and commit it.

    For time-based activities the elapsed minutes are then credited as reps
    and as challenge focus minutes. Those credits are best-effort: a failure
    is logged and rolled back, and the ended session is still returned.
    """
    activity = await get_activity_or_404(db, activity_id)
    session = await db.get(ActivitySession, session_id)
    if session is None or session.activity_id != activity.id or not session.is_active:
        raise NotFoundError("Active session not found")

    now = now or utcnow()
    duration = max(0, elapsed_ms(session.start_time, now) // _MS_PER_MINUTE)
    session.end_time = now
    session.duration_minutes = duration
    session.is_active = False
    await db.commit()
    # Detached so a rollback of the credits below cannot expire the returned row
    db.expunge(session)

    logger.info("session_ended", activity_id=activity.id, session_id=session.id, duration_minutes=duration)

    if activity.is_time_based and duration > 0:
        await _credit_time_based(db, activity, duration, now)
    return session


async def _credit_time_based(db: AsyncSession, activity: Activity, minutes: int, now: datetime) -> None:
    activity_id = activity.id
    try:
        activity.reps += minutes
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("time_based_credit_failed", target="reps", activity_id=activity_id, exc_info=True)

    try:
        await record_focus_minutes(db, minutes, now)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("time_based_credit_failed", target="challenge", activity_id=activity_id, exc_info=True)


async def get_timer_status(
    db: AsyncSession,
    activity_id: str,
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """Elapsed time of the running session, or None when the activity is idle."""
    activity = await get_activity_or_404(db, activity_id)
    session = await get_active_session(db, activity.id)
    if session is None:
        return None

    now = now or utcnow()
    elapsed = elapsed_ms(session.start_time, now)
    return {
        "session": session,
        "elapsed_minutes": elapsed // _MS_PER_MINUTE,
        "elapsed_seconds": elapsed // 1000,
        "elapsed_milliseconds": elapsed,
        "is_running": session.is_active,
        "start_time": session.start_time,
        "server_time": now,
    }
