"""Wall-clock helpers.

"Local" means the zone configured by ``IGO_TIMEZONE``. All stored
timestamps are UTC; SQLite returns them naive, so comparisons go through
``as_utc``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from igo.config import get_settings


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def local_zone() -> ZoneInfo:
    return _zone(get_settings().timezone)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_local(dt: datetime) -> datetime:
    return as_utc(dt).astimezone(local_zone())


def local_today(now: datetime | None = None) -> date:
    """Calendar date in the local zone."""
    return to_local(now or utcnow()).date()


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two instants."""
    delta = as_utc(end) - as_utc(start)
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000
