"""Motivational challenge: 64-day focus goal, daily progress rows and quotes.

The active challenge is always looked up in the database; nothing about it
is cached in-process.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select, update

from igo.calculations import round_half_up
from igo.challenge import countdown
from igo.clock import as_utc, local_today, utcnow
from igo.db.models import Challenge, ChallengeProgress, DailyQuote
from igo.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_active_challenge(db: AsyncSession) -> Challenge | None:
    result = await db.execute(select(Challenge).where(Challenge.is_active.is_(True)).limit(1))
    return result.scalar_one_or_none()


async def require_active_challenge(db: AsyncSession) -> Challenge:
    challenge = await get_active_challenge(db)
    if challenge is None:
        raise NotFoundError("No active challenge found")
    return challenge


async def get_progress_row(
    db: AsyncSession,
    challenge_id: str,
    progress_date: date,
) -> ChallengeProgress | None:
    result = await db.execute(
        select(ChallengeProgress).where(
            ChallengeProgress.challenge_id == challenge_id,
            ChallengeProgress.progress_date == progress_date,
        )
    )
    return result.scalar_one_or_none()


async def get_or_create_today_progress(
    db: AsyncSession,
    challenge: Challenge,
    now: datetime | None = None,
) -> ChallengeProgress:
    """Today's progress row, created with a full-budget baseline if missing."""
    now = now or utcnow()
    today = local_today(now)
    progress = await get_progress_row(db, challenge.id, today)
    if progress is not None:
        return progress

    progress = ChallengeProgress(
        challenge_id=challenge.id,
        progress_date=today,
        daily_focus_minutes=0,
        countdown_seconds_remaining=countdown.baseline_seconds(challenge.end_date, now),
    )
    db.add(progress)
    await db.flush()
    return progress


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def create_challenge(
    db: AsyncSession,
    ultimate_focus_goal_hours: float,
    now: datetime | None = None,
) -> tuple[Challenge, ChallengeProgress]:
    """Start a new 64-day challenge, deactivating any running one."""
    now = now or utcnow()
    await db.execute(update(Challenge).where(Challenge.is_active.is_(True)).values(is_active=False))
    await db.flush()

    challenge = Challenge(
        start_date=now,
        end_date=countdown.challenge_end(now),
        ultimate_focus_goal_hours=ultimate_focus_goal_hours,
        is_active=True,
    )
    db.add(challenge)
    await db.flush()

    progress = ChallengeProgress(
        challenge_id=challenge.id,
        progress_date=local_today(now),
        daily_focus_minutes=0,
        countdown_seconds_remaining=countdown.INITIAL_COUNTDOWN_SECONDS,
    )
    db.add(progress)
    await db.flush()

    logger.info(
        "challenge_created",
        challenge_id=challenge.id,
        goal_hours=ultimate_focus_goal_hours,
        end_date=challenge.end_date.isoformat(),
    )
    return challenge, progress


async def record_focus_minutes(
    db: AsyncSession,
    minutes: int,
    now: datetime | None = None,
) -> ChallengeProgress | None:
    """Add focus minutes to today's row of the active challenge.

    Returns None (and changes nothing) when no challenge is active.
    """
    challenge = await get_active_challenge(db)
    if challenge is None:
        logger.info("focus_minutes_skipped", reason="no_active_challenge", minutes=minutes)
        return None

    progress = await get_or_create_today_progress(db, challenge, now)
    progress.daily_focus_minutes += minutes
    await db.flush()
    logger.info(
        "focus_minutes_recorded",
        challenge_id=challenge.id,
        minutes=minutes,
        daily_focus_minutes=progress.daily_focus_minutes,
    )
    return progress


async def sync_countdown(
    db: AsyncSession,
    now: datetime | None = None,
) -> tuple[countdown.CountdownSnapshot, ChallengeProgress]:
    """Recompute the countdown and store it on today's progress row."""
    now = now or utcnow()
    challenge = await require_active_challenge(db)
    snap = countdown.snapshot(now, challenge.end_date)

    progress = await get_or_create_today_progress(db, challenge, now)
    progress.countdown_seconds_remaining = snap.total_seconds_remaining
    progress.last_countdown_update = now
    progress.is_active_period = snap.is_active_hours
    await db.flush()
    return snap, progress


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_current(
    db: AsyncSession,
    now: datetime | None = None,
) -> tuple[Challenge, ChallengeProgress, DailyQuote | None, bool]:
    """Active challenge, today's row (created if missing), its quote and the active-hours flag."""
    now = now or utcnow()
    challenge = await require_active_challenge(db)
    progress = await get_or_create_today_progress(db, challenge, now)
    quote = await db.get(DailyQuote, progress.daily_quote_id) if progress.daily_quote_id else None
    snap = countdown.snapshot(now)
    return challenge, progress, quote, snap.is_active_hours


def _quote_index(day: date, count: int) -> int:
    """Position in the quote pool for ``day``: its UTC-midnight epoch millis modulo the pool size."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return (int(midnight.timestamp()) * 1000) % count


async def get_daily_quote(db: AsyncSession, now: datetime | None = None) -> DailyQuote:
    """Today's quote, chosen once per day and cached on today's progress row."""
    now = now or utcnow()
    challenge = await require_active_challenge(db)
    progress = await get_or_create_today_progress(db, challenge, now)

    if progress.daily_quote_id:
        cached = await db.get(DailyQuote, progress.daily_quote_id)
        if cached is not None:
            return cached

    result = await db.execute(
        select(DailyQuote)
        .where(DailyQuote.is_active.is_(True))
        .order_by(DailyQuote.created_at, DailyQuote.id)
    )
    quotes = list(result.scalars().all())
    if not quotes:
        raise NotFoundError("No quotes available")

    quote = quotes[_quote_index(progress.progress_date, len(quotes))]
    progress.daily_quote_id = quote.id
    await db.flush()
    logger.debug("daily_quote_selected", quote_id=quote.id, progress_date=str(progress.progress_date))
    return quote


async def list_progress(db: AsyncSession, challenge_id: str) -> list[ChallengeProgress]:
    result = await db.execute(
        select(ChallengeProgress)
        .where(ChallengeProgress.challenge_id == challenge_id)
        .order_by(ChallengeProgress.progress_date)
    )
    return list(result.scalars().all())


def compute_stats(
    challenge: Challenge,
    rows: list[ChallengeProgress],
    today: date,
) -> dict:
    """Aggregate the per-day rows of one challenge."""
    total_minutes = sum(row.daily_focus_minutes or 0 for row in rows)
    total_hours = total_minutes // 60
    days_active = len(rows)
    goal = challenge.ultimate_focus_goal_hours
    percentage = min(100, total_hours * 100 / goal) if goal > 0 else 0
    today_row = next((row for row in rows if row.progress_date == today), None)

    return {
        "total_focus_hours": total_hours,
        "total_focus_minutes": total_minutes,
        "ultimate_goal_hours": goal,
        "progress_percentage": round_half_up(percentage, 2),
        "days_active": days_active,
        "days_remaining": max(0, countdown.CHALLENGE_DAYS - days_active),
        "current_countdown_seconds": today_row.countdown_seconds_remaining if today_row else 0,
        "average_daily_minutes": round_half_up(total_minutes / days_active) if days_active else 0,
    }


async def get_stats(
    db: AsyncSession,
    now: datetime | None = None,
) -> tuple[Challenge, dict, list[ChallengeProgress]]:
    challenge = await require_active_challenge(db)
    rows = await list_progress(db, challenge.id)
    return challenge, compute_stats(challenge, rows, local_today(now)), rows


async def timer_status(db: AsyncSession, now: datetime | None = None) -> dict:
    """Millisecond-precision countdown; totals are zero when no challenge is active."""
    now = now or utcnow()
    challenge = await get_active_challenge(db)
    snap = countdown.snapshot(now, challenge.end_date if challenge else None)
    local_now = snap.local_now
    return {
        "server_time": as_utc(now),
        "server_timestamp": int(as_utc(now).timestamp() * 1000),
        "daily_seconds_remaining": snap.daily_seconds_remaining,
        "daily_milliseconds_remaining": snap.daily_milliseconds_remaining,
        "total_seconds_remaining": snap.total_seconds_remaining,
        "total_days_remaining": snap.days_remaining,
        "is_active_hours": snap.is_active_hours,
        "current_hour": local_now.hour,
        "current_minute": local_now.minute,
        "current_second": local_now.second,
        "current_millisecond": local_now.microsecond // 1000,
        "active_hours_start": countdown.ACTIVE_HOURS_START,
        "active_hours_end": countdown.ACTIVE_HOURS_END,
    }
