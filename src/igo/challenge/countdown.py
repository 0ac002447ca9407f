"""Countdown arithmetic for the 64-day challenge.

Time is consumed during a fixed daily window (07:00-21:00 local). Each day
is budgeted at 16 hours even though the window spans 14; see DESIGN.md.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from igo.clock import elapsed_ms, to_local

CHALLENGE_DAYS = 64
ACTIVE_HOURS_START = 7
ACTIVE_HOURS_END = 21
DAILY_BUDGET_SECONDS = 16 * 3600
INITIAL_COUNTDOWN_SECONDS = CHALLENGE_DAYS * DAILY_BUDGET_SECONDS

_MS_PER_DAY = 86_400_000


@dataclass(frozen=True)
class CountdownSnapshot:
    """Countdown state at one instant."""

    now: datetime
    local_now: datetime
    is_active_hours: bool
    daily_seconds_remaining: int
    daily_milliseconds_remaining: int
    days_remaining: int
    total_seconds_remaining: int


def challenge_end(start: datetime) -> datetime:
    return start + timedelta(days=CHALLENGE_DAYS)


def is_active_hours(local_now: datetime) -> bool:
    return ACTIVE_HOURS_START <= local_now.hour < ACTIVE_HOURS_END


def daily_remaining_ms(local_now: datetime) -> int:
    """Milliseconds left in today's active window.

    Before the window opens the whole daily budget is left; after it closes
    nothing is.
    """
    if local_now.hour < ACTIVE_HOURS_START:
        return DAILY_BUDGET_SECONDS * 1000
    if local_now.hour >= ACTIVE_HOURS_END:
        return 0
    window_end = local_now.replace(hour=ACTIVE_HOURS_END, minute=0, second=0, microsecond=0)
    return elapsed_ms(local_now, window_end)


def days_remaining(end_date: datetime, now: datetime) -> int:
    """Calendar days left, rounding any partial day up."""
    ms = elapsed_ms(now, end_date)
    if ms <= 0:
        return 0
    return -(-ms // _MS_PER_DAY)


def baseline_seconds(end_date: datetime, now: datetime) -> int:
    """Full-budget estimate used when a day's progress row is first created."""
    return days_remaining(end_date, now) * DAILY_BUDGET_SECONDS


def total_seconds_remaining(end_date: datetime, now: datetime) -> int:
    """Today's remaining window plus the budget of every later day."""
    days = days_remaining(end_date, now)
    if days == 0:
        return 0
    daily_seconds = daily_remaining_ms(to_local(now)) // 1000
    return (days - 1) * DAILY_BUDGET_SECONDS + daily_seconds


def snapshot(now: datetime, end_date: datetime | None = None) -> CountdownSnapshot:
    """Compute the countdown at ``now``; totals are zero without a challenge."""
    local_now = to_local(now)
    active = is_active_hours(local_now)
    remaining_ms = daily_remaining_ms(local_now)
    days = days_remaining(end_date, now) if end_date is not None else 0
    total = total_seconds_remaining(end_date, now) if end_date is not None else 0
    return CountdownSnapshot(
        now=now,
        local_now=local_now,
        is_active_hours=active,
        daily_seconds_remaining=remaining_ms // 1000,
        daily_milliseconds_remaining=remaining_ms % 1000 if active else 0,
        days_remaining=days,
        total_seconds_remaining=total,
    )
