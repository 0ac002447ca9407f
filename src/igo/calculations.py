"""Derived-value formulas: earnings, completion and progress.

Pure functions over raw counters. Malformed numeric input is a caller
contract violation and is not checked here.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Protocol

REPS_PER_PAYOUT = 5
SUBTOPIC_REPS_GOAL = 18
MILESTONE_STEP = 1000


class RepsCounter(Protocol):
    reps_completed: int
    reps_goal: int


class EarningsHolder(Protocol):
    earnings: float


def topic_earnings(subtopics: Iterable[RepsCounter], money_per_5_reps: float) -> float:
    """floor(total reps / 5) * rate. Partial groups of 5 reps earn nothing."""
    total_reps = sum(s.reps_completed for s in subtopics)
    return (total_reps // REPS_PER_PAYOUT) * money_per_5_reps


def topic_completion(subtopics: Sequence[RepsCounter]) -> float:
    """Completed reps over goal reps as a percentage. Not clamped at 100."""
    if not subtopics:
        return 0
    total_completed = sum(s.reps_completed for s in subtopics)
    total_goal = sum(s.reps_goal for s in subtopics)
    if total_goal == 0:
        return 0
    return total_completed * 100 / total_goal


def subtopic_milestone_earnings(reps_completed: int, goal_amount: float) -> int:
    """Proportional credit toward an 18-rep goal, floored to a multiple of 1000."""
    earned = reps_completed * goal_amount / SUBTOPIC_REPS_GOAL
    return math.floor(earned / MILESTONE_STEP) * MILESTONE_STEP


def dashboard_progress(current_earnings: float, global_goal: float) -> float:
    """Total earnings as a percentage of the global goal."""
    if global_goal <= 0:
        return 0
    return current_earnings * 100 / global_goal


def total_earnings(topics: Iterable[EarningsHolder]) -> float:
    return sum(t.earnings for t in topics)


def period_progress(current: int, target: float) -> dict[str, float]:
    """Progress of a rep counter against one period's target."""
    return {
        "current": current,
        "target": target,
        "percentage": current * 100 / target if target > 0 else 0,
        "remaining": max(0, target - current),
    }


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half up, matching JavaScript Math.round."""
    factor = 10**digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded
