"""Challenge, countdown, quote and stats tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from igo.challenge import countdown
from igo.challenge import service as challenge_service
from igo.challenge.seed import QUOTE_SEED_DATA, seed_quotes
from igo.db.models import Challenge, ChallengeProgress, DailyQuote

T0 = datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc)


async def _start_challenge(client: AsyncClient, hours: float = 500) -> dict:
    response = await client.post("/api/challenge", json={"ultimateFocusGoalHours": hours})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/api/challenge/current"),
        ("POST", "/api/challenge/countdown/sync"),
        ("GET", "/api/challenge/quote"),
        ("GET", "/api/challenge/stats"),
    ],
)
async def test_requires_active_challenge(client: AsyncClient, method: str, path: str) -> None:
    response = await client.request(method, path)
    assert response.status_code == 404
    assert response.json() == {"detail": "No active challenge found"}


@pytest.mark.asyncio
async def test_create_challenge_validation(client: AsyncClient) -> None:
    response = await client.post("/api/challenge", json={"ultimateFocusGoalHours": 0})
    assert response.status_code == 400
    assert response.json() == {"detail": "Ultimate focus goal hours must be a positive number"}


@pytest.mark.asyncio
async def test_create_challenge_spans_64_days(client: AsyncClient) -> None:
    challenge = await _start_challenge(client)
    assert challenge["isActive"] is True
    assert challenge["ultimateFocusGoalHours"] == 500
    start = datetime.fromisoformat(challenge["startDate"])
    end = datetime.fromisoformat(challenge["endDate"])
    assert end - start == timedelta(days=64)


@pytest.mark.asyncio
async def test_new_challenge_deactivates_previous(client: AsyncClient, db_session: AsyncSession) -> None:
    first = await _start_challenge(client, hours=100)
    second = await _start_challenge(client, hours=200)

    rows = (await db_session.execute(select(Challenge.id, Challenge.is_active))).all()
    active = {row.id: row.is_active for row in rows}
    assert active == {first["id"]: False, second["id"]: True}

    current = (await client.get("/api/challenge/current")).json()
    assert current["challenge"]["id"] == second["id"]


@pytest.mark.asyncio
async def test_current_returns_seeded_progress(client: AsyncClient) -> None:
    challenge = await _start_challenge(client)
    response = await client.get("/api/challenge/current")
    assert response.status_code == 200
    data = response.json()
    assert data["challenge"]["id"] == challenge["id"]
    assert data["progress"]["countdownSecondsRemaining"] == 64 * 16 * 3600
    assert data["progress"]["dailyFocusMinutes"] == 0
    assert data["progress"]["dailyQuote"] is None
    assert isinstance(data["isActivePeriod"], bool)


@pytest.mark.asyncio
async def test_sync_updates_todays_row(client: AsyncClient) -> None:
    await _start_challenge(client)
    response = await client.post("/api/challenge/countdown/sync")
    assert response.status_code == 200
    data = response.json()
    assert data["daysRemaining"] == 64
    assert 0 <= data["dailySecondsRemaining"] <= countdown.DAILY_BUDGET_SECONDS
    assert data["totalSecondsRemaining"] == 63 * countdown.DAILY_BUDGET_SECONDS + data["dailySecondsRemaining"]
    assert 0 <= data["currentHour"] <= 23

    progress = (await client.get("/api/challenge/current")).json()["progress"]
    assert progress["countdownSecondsRemaining"] == data["totalSecondsRemaining"]
    assert progress["lastCountdownUpdate"] is not None
    assert progress["isActivePeriod"] == data["isActiveHours"]


@pytest.mark.asyncio
async def test_timer_status_without_challenge(client: AsyncClient) -> None:
    response = await client.get("/api/challenge/timer/status")
    assert response.status_code == 200
    data = response.json()
    assert data["totalSecondsRemaining"] == 0
    assert data["totalDaysRemaining"] == 0
    assert data["activeHoursStart"] == 7
    assert data["activeHoursEnd"] == 21


@pytest.mark.asyncio
async def test_timer_status_with_challenge(client: AsyncClient) -> None:
    await _start_challenge(client)
    data = (await client.get("/api/challenge/timer/status")).json()
    assert data["totalDaysRemaining"] == 64
    assert data["totalSecondsRemaining"] == 63 * countdown.DAILY_BUDGET_SECONDS + data["dailySecondsRemaining"]
    assert 0 <= data["dailyMillisecondsRemaining"] < 1000
    assert data["serverTimestamp"] > 0


@pytest.mark.asyncio
async def test_daily_quote_is_stable(client: AsyncClient, db_session: AsyncSession) -> None:
    await seed_quotes(db_session)
    await _start_challenge(client)

    first = await client.get("/api/challenge/quote")
    assert first.status_code == 200
    second = await client.get("/api/challenge/quote")
    assert first.json() == second.json()
    assert first.json()["quoteText"] in {q["quote_text"] for q in QUOTE_SEED_DATA}

    progress = (await client.get("/api/challenge/current")).json()["progress"]
    assert progress["dailyQuote"]["quoteText"] == first.json()["quoteText"]


@pytest.mark.asyncio
async def test_daily_quote_without_pool(client: AsyncClient) -> None:
    await _start_challenge(client)
    response = await client.get("/api/challenge/quote")
    assert response.status_code == 404
    assert response.json() == {"detail": "No quotes available"}


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, db_session: AsyncSession) -> None:
    await _start_challenge(client, hours=500)
    await challenge_service.record_focus_minutes(db_session, 150)
    await db_session.commit()

    response = await client.get("/api/challenge/stats")
    assert response.status_code == 200
    data = response.json()
    stats = data["stats"]
    assert stats["totalFocusMinutes"] == 150
    assert stats["totalFocusHours"] == 2
    assert stats["ultimateGoalHours"] == 500
    assert stats["progressPercentage"] == 0.4
    assert stats["daysActive"] == 1
    assert stats["daysRemaining"] == 63
    assert stats["averageDailyMinutes"] == 150
    assert stats["currentCountdownSeconds"] == 64 * 16 * 3600
    assert len(data["dailyProgress"]) == 1


# ---------------------------------------------------------------------------
# Service level, with a fixed clock
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_sync_at_fixed_time(db_session: AsyncSession) -> None:
    await challenge_service.create_challenge(db_session, 100, now=T0)
    snap, progress = await challenge_service.sync_countdown(db_session, now=T0.replace(hour=20))

    assert snap.days_remaining == 64
    assert snap.daily_seconds_remaining == 3600
    assert snap.total_seconds_remaining == 63 * countdown.DAILY_BUDGET_SECONDS + 3600
    assert progress.countdown_seconds_remaining == snap.total_seconds_remaining
    assert progress.is_active_period is True


@pytest.mark.asyncio
async def test_focus_minutes_next_day_creates_row_with_baseline(db_session: AsyncSession) -> None:
    challenge, _ = await challenge_service.create_challenge(db_session, 100, now=T0)
    progress = await challenge_service.record_focus_minutes(db_session, 25, now=T0 + timedelta(days=1))

    assert progress is not None
    assert progress.progress_date == (T0 + timedelta(days=1)).date()
    assert progress.daily_focus_minutes == 25
    assert progress.countdown_seconds_remaining == 63 * countdown.DAILY_BUDGET_SECONDS

    rows = (
        await db_session.execute(select(ChallengeProgress).where(ChallengeProgress.challenge_id == challenge.id))
    ).scalars().all()
    assert len(rows) == 2


@pytest.mark.asyncio
async def test_focus_minutes_accumulate(db_session: AsyncSession) -> None:
    await challenge_service.create_challenge(db_session, 100, now=T0)
    await challenge_service.record_focus_minutes(db_session, 10, now=T0)
    progress = await challenge_service.record_focus_minutes(db_session, 15, now=T0 + timedelta(hours=2))
    assert progress.daily_focus_minutes == 25


@pytest.mark.asyncio
async def test_focus_minutes_without_challenge(db_session: AsyncSession) -> None:
    assert await challenge_service.record_focus_minutes(db_session, 10) is None


@pytest.mark.asyncio
async def test_quote_index_uses_date(db_session: AsyncSession) -> None:
    await seed_quotes(db_session)
    await challenge_service.create_challenge(db_session, 100, now=T0)
    quote = await challenge_service.get_daily_quote(db_session, now=T0)

    pool = (
        await db_session.execute(select(DailyQuote).order_by(DailyQuote.created_at, DailyQuote.id))
    ).scalars().all()
    epoch_ms = int(datetime(2026, 3, 10, tzinfo=timezone.utc).timestamp()) * 1000
    assert quote.id == pool[epoch_ms % len(pool)].id


def test_stats_percentage_is_capped() -> None:
    challenge = Challenge(ultimate_focus_goal_hours=1, end_date=T0, start_date=T0)
    rows = [ChallengeProgress(progress_date=T0.date(), daily_focus_minutes=600, countdown_seconds_remaining=42)]
    stats = challenge_service.compute_stats(challenge, rows, T0.date())
    assert stats["progress_percentage"] == 100
    assert stats["current_countdown_seconds"] == 42
    assert stats["days_remaining"] == 63
