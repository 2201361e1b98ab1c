"""Streak statistics derived from a habit's completion days.

Everything here is a pure function of its inputs: no I/O, no clock. Callers
pass the reference ``today`` explicitly so results are deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional


@dataclass(frozen=True)
class StreakStats:
    """Derived streak statistics for one habit. Never persisted."""

    today_done: bool = False
    current_streak: int = 0
    longest_streak: int = 0

    def as_dict(self) -> dict[str, object]:
        return {
            "today_done": self.today_done,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
        }


@dataclass(frozen=True)
class HabitSummary:
    """Streak stats plus the counters a habit list view shows."""

    stats: StreakStats
    total_days: int
    last_done: Optional[date]

    def as_dict(self) -> dict[str, object]:
        payload = self.stats.as_dict()
        payload["total_days"] = self.total_days
        payload["last_done"] = self.last_done.isoformat() if self.last_done else None
        return payload


def _sorted_unique(days: Iterable[date]) -> list[date]:
    return sorted(set(days))


def current_streak(days: Iterable[date], today: date) -> int:
    """Consecutive completed days ending at ``today``; 0 when today is not done.

    Only ``today`` and earlier days are inspected, so future-dated
    completions never extend the count.
    """

    completed = set(days)
    if today not in completed:
        return 0

    streak = 0
    cursor = today
    while cursor in completed:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days anywhere in the history."""

    ordered = _sorted_unique(days)
    if not ordered:
        return 0

    longest = 1
    run = 1
    for previous, current in zip(ordered, ordered[1:]):
        # Whole-day difference on plain dates; no time-of-day or DST involved
        gap = current.toordinal() - previous.toordinal()
        run = run + 1 if gap == 1 else 1
        longest = max(longest, run)
    return longest


def compute_streak_stats(days: Iterable[date], *, today: date) -> StreakStats:
    """Return today-done flag, current streak and longest streak for ``days``.

    ``days`` may be unsorted and contain duplicates.
    """

    ordered = _sorted_unique(days)
    if not ordered:
        return StreakStats()

    return StreakStats(
        today_done=today in ordered,
        current_streak=current_streak(ordered, today),
        longest_streak=longest_streak(ordered),
    )


def habit_summary(days: Iterable[date], *, today: date) -> HabitSummary:
    """Stats plus ``total_days`` and ``last_done`` for list views."""

    ordered = _sorted_unique(days)
    return HabitSummary(
        stats=compute_streak_stats(ordered, today=today),
        total_days=len(ordered),
        last_done=ordered[-1] if ordered else None,
    )


__all__ = [
    "HabitSummary",
    "StreakStats",
    "compute_streak_stats",
    "current_streak",
    "habit_summary",
    "longest_streak",
]
