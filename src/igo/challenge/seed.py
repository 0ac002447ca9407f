"""Motivational quote pool for the daily quote rotation."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from igo.db.models import DailyQuote

logger = logging.getLogger(__name__)

QUOTE_SEED_DATA: list[dict] = [
    {
        "quote_text": "We are what we repeatedly do. Excellence, then, is not an act, but a habit.",
        "author": "Will Durant",
        "category": "discipline",
    },
    {
        "quote_text": "It does not matter how slowly you go as long as you do not stop.",
        "author": "Confucius",
        "category": "persistence",
    },
    {
        "quote_text": "The secret of getting ahead is getting started.",
        "author": "Mark Twain",
        "category": "action",
    },
    {
        "quote_text": "Concentrate all your thoughts upon the work at hand.",
        "author": "Alexander Graham Bell",
        "category": "focus",
    },
    {
        "quote_text": "Well begun is half done.",
        "author": "Aristotle",
        "category": "action",
    },
    {
        "quote_text": "Energy and persistence conquer all things.",
        "author": "Benjamin Franklin",
        "category": "persistence",
    },
    {
        "quote_text": "The successful warrior is the average man, with laser-like focus.",
        "author": "Bruce Lee",
        "category": "focus",
    },
    {
        "quote_text": "Lost time is never found again.",
        "author": "Benjamin Franklin",
        "category": "time",
    },
    {
        "quote_text": "Either you run the day or the day runs you.",
        "author": "Jim Rohn",
        "category": "discipline",
    },
    {
        "quote_text": "Small deeds done are better than great deeds planned.",
        "author": "Peter Marshall",
        "category": "action",
    },
    {
        "quote_text": "Discipline is choosing between what you want now and what you want most.",
        "author": "Augusta F. Kantra",
        "category": "discipline",
    },
    {
        "quote_text": "You will never find time for anything. If you want time, you must make it.",
        "author": "Charles Buxton",
        "category": "time",
    },
]


async def seed_quotes(db: AsyncSession) -> int:
    """Insert quotes that are not in the pool yet. Returns the number inserted."""
    existing = set((await db.execute(select(DailyQuote.quote_text))).scalars().all())
    inserted = 0
    for quote_data in QUOTE_SEED_DATA:
        if quote_data["quote_text"] in existing:
            continue
        db.add(DailyQuote(**quote_data, is_active=True))
        inserted += 1

    await db.commit()
    logger.info("Seeded %d motivational quotes", inserted)
    return inserted
