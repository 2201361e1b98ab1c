"""Tests for the streak engine.

Covers the reference scenarios plus edge cases:
- empty history
- unsorted and duplicated input
- runs that diverge from the current streak
- future-dated completions
- month, year and leap-day boundaries
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from lifeboard.services.streaks import (
    StreakStats,
    compute_streak_stats,
    current_streak,
    habit_summary,
    longest_streak,
)

TODAY = date(2024, 3, 15)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in offsets]


class TestReferenceScenarios:
    def test_no_completions(self):
        stats = compute_streak_stats([], today=TODAY)
        assert stats == StreakStats(today_done=False, current_streak=0, longest_streak=0)

    def test_only_today(self):
        stats = compute_streak_stats(days_ago(0), today=TODAY)
        assert stats == StreakStats(today_done=True, current_streak=1, longest_streak=1)

    def test_three_days_ending_today(self):
        stats = compute_streak_stats(days_ago(2, 1, 0), today=TODAY)
        assert stats == StreakStats(today_done=True, current_streak=3, longest_streak=3)

    def test_old_run_and_today(self):
        """Longest run lies in the past; today alone is the current streak."""
        stats = compute_streak_stats(days_ago(10, 9, 8, 0), today=TODAY)
        assert stats == StreakStats(today_done=True, current_streak=1, longest_streak=3)

    def test_only_yesterday(self):
        stats = compute_streak_stats(days_ago(1), today=TODAY)
        assert stats == StreakStats(today_done=False, current_streak=0, longest_streak=1)


class TestCurrentStreak:
    def test_streak_ending_yesterday_reports_zero(self):
        """A run that stops before today is not current."""
        assert current_streak(days_ago(1, 2, 3, 4, 5), TODAY) == 0

    def test_gap_stops_backward_walk(self):
        assert current_streak(days_ago(0, 1, 3, 4), TODAY) == 2

    def test_future_days_do_not_extend_streak(self):
        stats = compute_streak_stats(days_ago(-2, -1, 0, 1), today=TODAY)
        assert stats.today_done is True
        assert stats.current_streak == 2
        # Future days still belong to the recorded history
        assert stats.longest_streak == 4

    def test_future_only_history(self):
        stats = compute_streak_stats(days_ago(-1), today=TODAY)
        assert stats == StreakStats(today_done=False, current_streak=0, longest_streak=1)


class TestLongestStreak:
    def test_single_completion_is_one(self):
        assert longest_streak([date(2020, 1, 1)]) == 1

    def test_empty_is_zero(self):
        assert longest_streak([]) == 0

    def test_multiple_runs_returns_longest(self):
        days = (
            [date(2024, 1, 1) + timedelta(days=i) for i in range(3)]
            + [date(2024, 1, 10) + timedelta(days=i) for i in range(7)]
            + [date(2024, 1, 20) + timedelta(days=i) for i in range(4)]
        )
        assert longest_streak(days) == 7

    def test_gaps_do_not_reduce_earlier_runs(self):
        days = [date(2024, 1, d) for d in (1, 2, 3, 4, 5, 7, 9, 11)]
        assert longest_streak(days) == 5

    @pytest.mark.parametrize(
        "days, expected",
        [
            ([date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)], 3),
            ([date(2023, 12, 30), date(2023, 12, 31), date(2024, 1, 1)], 3),
            ([date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)], 3),
            ([date(2023, 2, 28), date(2023, 3, 1)], 2),
        ],
    )
    def test_calendar_boundaries(self, days, expected):
        assert longest_streak(days) == expected


class TestDefensiveInput:
    def test_unsorted_input(self):
        shuffled = [TODAY, TODAY - timedelta(days=2), TODAY - timedelta(days=1)]
        stats = compute_streak_stats(shuffled, today=TODAY)
        assert stats == StreakStats(today_done=True, current_streak=3, longest_streak=3)

    def test_duplicates_are_collapsed(self):
        stats = compute_streak_stats(days_ago(0, 0, 1, 1, 1), today=TODAY)
        assert stats == StreakStats(today_done=True, current_streak=2, longest_streak=2)

    def test_accepts_generators(self):
        stats = compute_streak_stats((d for d in days_ago(0, 1)), today=TODAY)
        assert stats.current_streak == 2


class TestProperties:
    def test_on_best_streak_current_equals_longest(self):
        days = [date(2024, 1, 1), date(2024, 1, 2)] + days_ago(*range(14))
        stats = compute_streak_stats(days, today=TODAY)
        assert stats.today_done is True
        assert stats.current_streak == stats.longest_streak == 14

    @pytest.mark.parametrize(
        "offsets",
        [(0,), (5,), (3, 2, 1), (30, 29, 0), (-3, 7), (100, 50, 25, 0, 1)],
    )
    def test_longest_at_least_one_when_any_completion(self, offsets):
        assert compute_streak_stats(days_ago(*offsets), today=TODAY).longest_streak >= 1

    def test_current_can_be_below_longest(self):
        stats = compute_streak_stats(days_ago(20, 19, 18, 17, 1, 0), today=TODAY)
        assert stats.current_streak == 2
        assert stats.longest_streak == 4


class TestSummary:
    def test_summary_counts_and_last_done(self):
        summary = habit_summary(days_ago(4, 1, 0, 0), today=TODAY)
        assert summary.total_days == 3
        assert summary.last_done == TODAY
        assert summary.stats.current_streak == 2

    def test_summary_of_empty_history(self):
        summary = habit_summary([], today=TODAY)
        assert summary.total_days == 0
        assert summary.last_done is None
        assert summary.as_dict() == {
            "today_done": False,
            "current_streak": 0,
            "longest_streak": 0,
            "total_days": 0,
            "last_done": None,
        }

    def test_stats_as_dict(self):
        stats = compute_streak_stats(days_ago(0), today=TODAY)
        assert stats.as_dict() == {"today_done": True, "current_streak": 1, "longest_streak": 1}
