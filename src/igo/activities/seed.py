"""Default activities.

"Focus Hour" is the time-based activity whose sessions feed the focus
challenge. Rows created before the ``is_time_based`` flag existed are
recognised by their legacy names and flagged.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from igo.activities.schemas import TIME_BASED_NAMES
from igo.db.models import Activity

logger = logging.getLogger(__name__)

FOCUS_ACTIVITY_NAME = "Focus Hour"

ACTIVITY_SEED_DATA: list[dict] = [
    {
        "name": FOCUS_ACTIVITY_NAME,
        "reps": 0,
        "goals": {"daily": 240, "weekly": 1680, "monthly": 7200, "yearly": 87600},
        "is_time_based": True,
    },
]


async def seed_activities(db: AsyncSession) -> int:
    """Create missing default activities and flag legacy time-based rows.

    Returns the number of activities created.
    """
    await db.execute(
        update(Activity)
        .where(Activity.name.in_(TIME_BASED_NAMES), Activity.is_time_based.is_(False))
        .values(is_time_based=True)
        .execution_options(synchronize_session=False)
    )

    existing = set((await db.execute(select(Activity.name))).scalars().all())
    created = 0
    for activity_data in ACTIVITY_SEED_DATA:
        if activity_data["name"] in existing:
            continue
        db.add(Activity(**activity_data))
        created += 1

    await db.commit()
    logger.info("Seeded %d default activities", created)
    return created
