"""Field rules shared by the request command models.

Each rule takes the raw JSON value, returns the normalized value and raises
``ValueError`` with the client-facing message. The command models call them
from ``mode="before"`` field validators, so the rules see the value exactly
as sent (booleans are never numbers, strings never coerce).
"""

from __future__ import annotations

import math
from typing import Any

GOAL_AMOUNT_STEP = 1000
GOAL_PERIODS = ("daily", "weekly", "monthly", "yearly")
SESSION_TYPES = ("manual", "timer")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def is_whole_number(value: Any) -> bool:
    return is_number(value) and float(value).is_integer()


def non_empty_string(value: Any, message: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise ValueError(message)


def positive_number(value: Any, message: str) -> float:
    if not is_number(value) or value <= 0:
        raise ValueError(message)
    return value


def notes(value: Any) -> str:
    if not value:
        return ""
    if not isinstance(value, str):
        raise ValueError("notes must be a string")
    return value


def urls(value: Any) -> list[str]:
    """Anything but a list means no links."""
    if not isinstance(value, list):
        return []
    if not all(isinstance(url, str) for url in value):
        raise ValueError("urls must contain only strings")
    return list(value)


def goal_amount(value: Any) -> float:
    amount = positive_number(value, "goalAmount must be a positive number")
    if amount % GOAL_AMOUNT_STEP != 0:
        raise ValueError("goalAmount must be a multiple of 1000")
    return amount


def money_per_5_reps(value: Any) -> float:
    if not is_number(value) or value < 0:
        raise ValueError("moneyPer5Reps must be a positive number")
    return value


def goal_targets(value: Any) -> dict[str, float]:
    """Period targets that were sent; unknown keys are dropped."""
    if not isinstance(value, dict):
        raise ValueError("goals must be an object with daily, weekly, monthly and yearly targets")
    targets: dict[str, float] = {}
    for period in GOAL_PERIODS:
        if period not in value:
            continue
        target = value[period]
        if not is_number(target) or target < 0:
            raise ValueError(f"goals.{period} must be a non-negative number")
        targets[period] = target
    return targets
