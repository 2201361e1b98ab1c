"""Habit operations invoked by the request layer.

Each call takes the caller's ``UserSession``, resolves the habit for that
user, reads the completion ledger and returns plain result objects that the
caller serializes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional

from ..config import BaseConfig
from ..domain.queries import HabitQuery
from ..domain.repositories import HabitRepository
from ..errors import HabitNotFound, ValidationError
from ..forms import HabitForm, ToggleDateForm, parse_form
from ..logging_config import get_logger
from ..models.habit import Habit
from .auth import UserSession
from .ledger import CompletionLedger, DayLike, normalize_day, today_utc
from .streaks import HabitSummary, StreakStats, compute_streak_stats, habit_summary

logger = get_logger("services.habits")

Clock = Callable[[], date]


def habit_metadata(habit: Habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "name": habit.name,
        "icon": habit.icon,
        "color": habit.color,
        "created_at": habit.created_at.isoformat() if habit.created_at else None,
    }


@dataclass(frozen=True)
class HabitListItem:
    habit: Habit
    summary: HabitSummary

    def as_dict(self) -> dict[str, Any]:
        payload = habit_metadata(self.habit)
        payload.update(self.summary.as_dict())
        return payload


@dataclass(frozen=True)
class HabitDetail:
    """Habit metadata, completions inside the heatmap window and stats over them."""

    habit: Habit
    completions: list[date]
    stats: StreakStats
    window_start: date
    window_end: date

    def as_dict(self) -> dict[str, Any]:
        return {
            "habit": habit_metadata(self.habit),
            "completions": [day.isoformat() for day in self.completions],
            "stats": self.stats.as_dict(),
            "window": {
                "start": self.window_start.isoformat(),
                "end": self.window_end.isoformat(),
            },
        }


@dataclass(frozen=True)
class ToggleResult:
    done: bool
    created: bool
    day: date
    message: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"done": self.done, "date": self.day.isoformat()}
        if self.message:
            payload["message"] = self.message
        return payload


class HabitService:
    """Create, list, inspect, delete and toggle habits for the signed-in user."""

    def __init__(
        self,
        repo: HabitRepository,
        ledger: CompletionLedger,
        config: BaseConfig,
        clock: Clock = today_utc,
    ) -> None:
        self.repo = repo
        self.ledger = ledger
        self.config = config
        self.clock = clock

    def _require_habit(self, user_id: int, habit_id: int) -> Habit:
        habit = self.repo.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise HabitNotFound(habit_id)
        return habit

    def create_habit(self, session: UserSession, payload: dict[str, Any]) -> Habit:
        user_id = session.require_user_id()
        form = parse_form(HabitForm, payload)
        habit = Habit(
            user_id=user_id,
            name=form.name,
            icon=form.icon or self.config.DEFAULT_HABIT_ICON,
            color=form.color or self.config.DEFAULT_HABIT_COLOR,
        )
        habit = self.repo.create(habit, user_id=user_id)
        logger.info("Habit created", extra={"user_id": user_id, "habit_id": habit.id})
        return habit

    def list_habits(
        self, session: UserSession, query: HabitQuery | None = None
    ) -> list[HabitListItem]:
        user_id = session.require_user_id()
        habits = self.repo.list_habits(user_id=user_id, query=query)
        habit_ids = [habit.id for habit in habits if habit.id is not None]
        days_by_habit = self.repo.completion_days_by_habit(habit_ids, user_id=user_id)

        today = self.clock()
        return [
            HabitListItem(
                habit=habit,
                summary=habit_summary(days_by_habit.get(habit.id, []), today=today),
            )
            for habit in habits
            if habit.id is not None
        ]

    def habit_detail(self, session: UserSession, habit_id: int) -> HabitDetail:
        user_id = session.require_user_id()
        habit = self._require_habit(user_id, habit_id)

        today = self.clock()
        window_start = today - timedelta(days=self.config.HEATMAP_DAYS - 1)
        days = self.repo.list_completion_days(
            habit_id, user_id=user_id, start=window_start, end=today
        )
        return HabitDetail(
            habit=habit,
            completions=days,
            stats=compute_streak_stats(days, today=today),
            window_start=window_start,
            window_end=today,
        )

    def delete_habit(self, session: UserSession, habit_id: int) -> None:
        """Delete a habit and all of its completions in one transaction."""

        user_id = session.require_user_id()
        if not self.repo.delete(habit_id, user_id=user_id):
            raise HabitNotFound(habit_id)
        logger.info("Habit deleted", extra={"user_id": user_id, "habit_id": habit_id})

    def toggle_today(self, session: UserSession, habit_id: int) -> ToggleResult:
        """Mark today done; under the toggle policy a second call unmarks it."""

        user_id = session.require_user_id()
        today = self.clock()
        return self._toggle(user_id, habit_id, today, today)

    def toggle_date(self, session: UserSession, habit_id: int, value: DayLike) -> ToggleResult:
        """Add or remove the completion for an arbitrary day."""

        user_id = session.require_user_id()
        if isinstance(value, str):
            value = parse_form(ToggleDateForm, {"date": value}).date
        day = normalize_day(value)
        today = self.clock()
        if day > today and not self.config.ALLOW_FUTURE_COMPLETIONS:
            raise ValidationError.for_field("date", "Cannot record a completion for a future date")
        return self._toggle(user_id, habit_id, day, today)

    def _toggle(self, user_id: int, habit_id: int, day: date, today: date) -> ToggleResult:
        self._require_habit(user_id, habit_id)

        if self.repo.get_completion(habit_id, day, user_id=user_id) is None:
            result = self.ledger.record_completion(user_id, habit_id, day)
            if result.created:
                return ToggleResult(done=True, created=True, day=day)
            # Lost a race with a concurrent toggle that inserted the same day
            return ToggleResult(done=True, created=False, day=day, message="Already done")

        if self.config.one_way_completions and day == today:
            return ToggleResult(
                done=True, created=False, day=day, message="Already done for today"
            )

        self.ledger.remove_completion(user_id, habit_id, day)
        return ToggleResult(done=False, created=False, day=day)


__all__ = [
    "HabitDetail",
    "HabitListItem",
    "HabitService",
    "ToggleResult",
    "habit_metadata",
]
