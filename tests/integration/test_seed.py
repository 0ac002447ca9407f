"""Seed data tests."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from igo.activities.seed import FOCUS_ACTIVITY_NAME, seed_activities
from igo.challenge.seed import QUOTE_SEED_DATA, seed_quotes
from igo.db.models import Activity, DailyQuote


@pytest.mark.asyncio
async def test_seed_quotes_is_idempotent(db_session: AsyncSession) -> None:
    assert await seed_quotes(db_session) == len(QUOTE_SEED_DATA)
    assert await seed_quotes(db_session) == 0

    count = len((await db_session.execute(select(DailyQuote))).scalars().all())
    assert count == len(QUOTE_SEED_DATA)


@pytest.mark.asyncio
async def test_seed_creates_time_based_focus_activity(db_session: AsyncSession) -> None:
    assert await seed_activities(db_session) == 1
    assert await seed_activities(db_session) == 0

    focus = (await db_session.execute(select(Activity).where(Activity.name == FOCUS_ACTIVITY_NAME))).scalar_one()
    assert focus.is_time_based is True
    assert focus.goals["daily"] == 240


@pytest.mark.asyncio
async def test_seed_flags_legacy_focus_activity(db_session: AsyncSession) -> None:
    db_session.add(Activity(name="FOCUSSED TIME", reps=30, goals={}, is_time_based=False))
    await db_session.commit()

    await seed_activities(db_session)

    legacy = (
        await db_session.execute(
            select(Activity.is_time_based, Activity.reps).where(Activity.name == "FOCUSSED TIME")
        )
    ).one()
    assert legacy.is_time_based is True
    assert legacy.reps == 30
