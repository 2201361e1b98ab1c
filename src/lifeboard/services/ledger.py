"""Completion ledger: per-user, per-habit record of completed UTC days."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Union

from ..domain.repositories import HabitRepository
from ..errors import HabitNotFound, ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion

logger = get_logger("services.ledger")

DayLike = Union[date, datetime, str]


def normalize_day(value: DayLike) -> date:
    """Strip time-of-day and return the UTC calendar day of ``value``.

    Naive datetimes are taken to be UTC already. Strings may be ``YYYY-MM-DD``
    or a full ISO-8601 timestamp (a trailing ``Z`` is accepted).
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValidationError.for_field("date", "date is required")
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            if len(raw) == 10:
                return date.fromisoformat(raw)
            return normalize_day(datetime.fromisoformat(raw))
        except ValueError as exc:
            raise ValidationError.for_field("date", f"Invalid date: {value!r}") from exc
    raise ValidationError.for_field("date", f"Unsupported date value: {value!r}")


def today_utc(now: datetime | None = None) -> date:
    """Return the current UTC day (or the day of ``now`` when given)."""

    return normalize_day(now or datetime.now(timezone.utc))


@dataclass(frozen=True)
class RecordResult:
    """Outcome of ``record_completion``; ``created`` is False for a no-op."""

    completion: HabitCompletion
    created: bool

    @property
    def day(self) -> date:
        return self.completion.day


class CompletionLedger:
    """Record, remove and list completion days for habits a user owns."""

    def __init__(self, repo: HabitRepository) -> None:
        self.repo = repo

    def _require_habit(self, user_id: int, habit_id: int) -> Habit:
        habit = self.repo.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise HabitNotFound(habit_id)
        return habit

    def record_completion(self, user_id: int, habit_id: int, day: DayLike) -> RecordResult:
        """Insert a completion for ``day`` unless one is already recorded."""

        self._require_habit(user_id, habit_id)
        normalized = normalize_day(day)
        completion, created = self.repo.add_completion(habit_id, normalized, user_id=user_id)
        if created:
            logger.info(
                "Completion recorded",
                extra={"user_id": user_id, "habit_id": habit_id, "day": normalized.isoformat()},
            )
        else:
            logger.debug(
                "Completion already recorded",
                extra={"user_id": user_id, "habit_id": habit_id, "day": normalized.isoformat()},
            )
        return RecordResult(completion=completion, created=created)

    def remove_completion(self, user_id: int, habit_id: int, day: DayLike) -> bool:
        """Delete the completion for ``day``; returns whether anything was removed."""

        self._require_habit(user_id, habit_id)
        normalized = normalize_day(day)
        removed = self.repo.delete_completion(habit_id, normalized, user_id=user_id)
        if removed:
            logger.info(
                "Completion removed",
                extra={"user_id": user_id, "habit_id": habit_id, "day": normalized.isoformat()},
            )
        return removed

    def is_completed(self, user_id: int, habit_id: int, day: DayLike) -> bool:
        self._require_habit(user_id, habit_id)
        return (
            self.repo.get_completion(habit_id, normalize_day(day), user_id=user_id) is not None
        )

    def list_completions(
        self,
        user_id: int,
        habit_id: int,
        start: DayLike | None = None,
        end: DayLike | None = None,
    ) -> list[date]:
        """Completion days in ascending order, optionally bounded to ``[start, end]``."""

        self._require_habit(user_id, habit_id)
        return self.repo.list_completion_days(
            habit_id,
            user_id=user_id,
            start=normalize_day(start) if start is not None else None,
            end=normalize_day(end) if end is not None else None,
        )

    def delete_all_for_habit(self, user_id: int, habit_id: int) -> int:
        """Remove every completion of a habit; returns how many were deleted."""

        self._require_habit(user_id, habit_id)
        removed = self.repo.delete_completions_for_habit(habit_id, user_id=user_id)
        logger.info(
            "Completions cleared",
            extra={"user_id": user_id, "habit_id": habit_id, "removed": removed},
        )
        return removed


__all__ = ["CompletionLedger", "RecordResult", "normalize_day", "today_utc"]
