"""Challenge endpoints: creation, countdown, daily quote and stats."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from igo.challenge import service
from igo.challenge.schemas import (
    ChallengeCreate,
    ChallengeResponse,
    ChallengeStats,
    ChallengeStatsResponse,
    CountdownSyncResponse,
    CurrentChallengeResponse,
    ProgressResponse,
    QuoteResponse,
    TimerStatusResponse,
)
from igo.clock import as_utc
from igo.database import get_session
from igo.db.models import ChallengeProgress, DailyQuote

router = APIRouter(prefix="/api/challenge", tags=["Challenge"])


def _progress_response(progress: ChallengeProgress, quote: DailyQuote | None = None) -> ProgressResponse:
    return ProgressResponse(
        id=progress.id,
        challenge_id=progress.challenge_id,
        progress_date=progress.progress_date,
        daily_focus_minutes=progress.daily_focus_minutes,
        countdown_seconds_remaining=progress.countdown_seconds_remaining,
        daily_quote_id=progress.daily_quote_id,
        daily_quote=QuoteResponse.model_validate(quote) if quote else None,
        is_active_period=progress.is_active_period,
        last_countdown_update=progress.last_countdown_update,
    )


@router.post("", response_model=ChallengeResponse, status_code=201)
async def create_challenge(
    command: ChallengeCreate,
    db: AsyncSession = Depends(get_session),
) -> ChallengeResponse:
    """Start a new 64-day challenge. Any running challenge is deactivated."""
    challenge, _ = await service.create_challenge(db, command.ultimate_focus_goal_hours)
    await db.commit()
    return ChallengeResponse.model_validate(challenge)


@router.get("/current", response_model=CurrentChallengeResponse)
async def current_challenge(db: AsyncSession = Depends(get_session)) -> CurrentChallengeResponse:
    challenge, progress, quote, active = await service.get_current(db)
    await db.commit()
    return CurrentChallengeResponse(
        challenge=ChallengeResponse.model_validate(challenge),
        progress=_progress_response(progress, quote),
        is_active_period=active,
    )


@router.post("/countdown/sync", response_model=CountdownSyncResponse)
async def sync_countdown(db: AsyncSession = Depends(get_session)) -> CountdownSyncResponse:
    """Recompute the remaining time and store it on today's progress row."""
    snap, _ = await service.sync_countdown(db)
    await db.commit()
    return CountdownSyncResponse(
        server_time=as_utc(snap.now),
        daily_seconds_remaining=snap.daily_seconds_remaining,
        total_seconds_remaining=snap.total_seconds_remaining,
        is_active_hours=snap.is_active_hours,
        current_hour=snap.local_now.hour,
        days_remaining=snap.days_remaining,
    )


@router.get("/quote", response_model=QuoteResponse)
async def daily_quote(db: AsyncSession = Depends(get_session)) -> QuoteResponse:
    quote = await service.get_daily_quote(db)
    await db.commit()
    return QuoteResponse.model_validate(quote)


@router.get("/stats", response_model=ChallengeStatsResponse)
async def challenge_stats(db: AsyncSession = Depends(get_session)) -> ChallengeStatsResponse:
    challenge, stats, rows = await service.get_stats(db)
    return ChallengeStatsResponse(
        challenge=ChallengeResponse.model_validate(challenge),
        stats=ChallengeStats(**stats),
        daily_progress=[_progress_response(row) for row in rows],
    )


@router.get("/timer/status", response_model=TimerStatusResponse)
async def timer_status(db: AsyncSession = Depends(get_session)) -> TimerStatusResponse:
    """Millisecond-precision countdown for client-side timers."""
    return TimerStatusResponse(**await service.timer_status(db))
