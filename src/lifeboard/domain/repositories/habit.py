"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ...models.habit import Habit, HabitCompletion
from ..queries import HabitQuery


class HabitRepository(Protocol):
    """Repository for habits and their completion ledger, scoped by user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit owned by ``user_id``."""
        ...

    def list_habits(self, *, user_id: int, query: HabitQuery | None = None) -> list[Habit]:
        """List a user's habits filtered and ordered by ``query``."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit together with all of its completions."""
        ...

    # Completion ledger operations
    def get_completion(
        self, habit_id: int, day: date, *, user_id: int
    ) -> Optional[HabitCompletion]:
        """Get the completion for a single day."""
        ...

    def add_completion(
        self, habit_id: int, day: date, *, user_id: int
    ) -> tuple[HabitCompletion, bool]:
        """Insert a completion unless one exists; returns (row, created)."""
        ...

    def delete_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Delete the completion for a day; returns whether a row was removed."""
        ...

    def delete_completions_for_habit(self, habit_id: int, *, user_id: int) -> int:
        """Delete every completion of a habit; returns the number removed."""
        ...

    def list_completion_days(
        self,
        habit_id: int,
        *,
        user_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[date]:
        """Completion days for a habit, ascending, optionally bounded."""
        ...

    def completion_days_by_habit(
        self, habit_ids: Sequence[int], *, user_id: int
    ) -> dict[int, list[date]]:
        """Completion days for several habits, grouped by habit id."""
        ...
