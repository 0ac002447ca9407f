"""Unit tests for the earnings, completion and progress formulas."""

from dataclasses import dataclass

from igo.calculations import (
    dashboard_progress,
    period_progress,
    round_half_up,
    subtopic_milestone_earnings,
    topic_completion,
    topic_earnings,
    total_earnings,
)


@dataclass
class Sub:
    reps_completed: int
    reps_goal: int = 18


@dataclass
class EarningTopic:
    earnings: float


class TestTopicEarnings:
    def test_pays_per_full_group_of_five(self):
        assert topic_earnings([Sub(7), Sub(4)], 10) == 20

    def test_partial_group_earns_nothing(self):
        assert topic_earnings([Sub(4)], 10) == 0

    def test_no_subtopics(self):
        assert topic_earnings([], 25) == 0

    def test_fractional_rate(self):
        assert topic_earnings([Sub(10)], 2.5) == 5.0


class TestTopicCompletion:
    def test_empty_topic_is_zero(self):
        assert topic_completion([]) == 0

    def test_half_done(self):
        assert topic_completion([Sub(9)]) == 50

    def test_aggregates_over_subtopics(self):
        assert topic_completion([Sub(18), Sub(0)]) == 50

    def test_not_clamped_above_100(self):
        assert topic_completion([Sub(36)]) == 200

    def test_zero_goal_total(self):
        assert topic_completion([Sub(5, reps_goal=0)]) == 0


class TestMilestoneEarnings:
    def test_full_goal_pays_full_amount(self):
        assert subtopic_milestone_earnings(18, 1000) == 1000

    def test_half_progress_floors_to_zero(self):
        assert subtopic_milestone_earnings(9, 1000) == 0

    def test_floors_to_thousands(self):
        # 10/18 of 3000 is 1666.67
        assert subtopic_milestone_earnings(10, 3000) == 1000

    def test_exact_multiple(self):
        assert subtopic_milestone_earnings(9, 4000) == 2000

    def test_no_reps(self):
        assert subtopic_milestone_earnings(0, 5000) == 0


class TestDashboardProgress:
    def test_fractional_percentage(self):
        assert dashboard_progress(1250.5, 5000) == 25.01

    def test_zero_goal(self):
        assert dashboard_progress(1234, 0) == 0

    def test_negative_goal(self):
        assert dashboard_progress(100, -5) == 0

    def test_can_exceed_100(self):
        assert dashboard_progress(7500, 5000) == 150


class TestTotalEarnings:
    def test_sums_topics(self):
        assert total_earnings([EarningTopic(10), EarningTopic(2.5)]) == 12.5

    def test_empty(self):
        assert total_earnings([]) == 0


class TestPeriodProgress:
    def test_partial(self):
        assert period_progress(25, 50) == {"current": 25, "target": 50, "percentage": 50, "remaining": 25}

    def test_zero_target(self):
        progress = period_progress(10, 0)
        assert progress["percentage"] == 0
        assert progress["remaining"] == 0

    def test_over_target(self):
        progress = period_progress(60, 50)
        assert progress["percentage"] == 120
        assert progress["remaining"] == 0


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-2.5) == -2

    def test_returns_int_without_digits(self):
        assert isinstance(round_half_up(66.6), int)

    def test_two_digits(self):
        assert round_half_up(33.333333, 2) == 33.33
