"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from sqlmodel.sql.expression import SelectOfScalar

from ...domain.queries import HabitQuery
from ...models.habit import Habit, HabitCompletion
from ..database import SessionFactory


def apply_habit_query(statement: SelectOfScalar, query: HabitQuery | None) -> SelectOfScalar:
    """Translate a ``HabitQuery`` into WHERE and ORDER BY clauses."""

    query = query or HabitQuery()
    if query.search is not None:
        needle = query.search.strip().lower()
        statement = statement.where(func.lower(Habit.name).contains(needle, autoescape=True))
    if query.color is not None:
        statement = statement.where(Habit.color == query.color.strip())

    column = Habit.name if query.order_by == "name" else Habit.created_at
    if query.descending:
        return statement.order_by(column.desc(), Habit.id.desc())  # type: ignore[union-attr]
    return statement.order_by(column.asc(), Habit.id.asc())  # type: ignore[union-attr]


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _completion_statement(habit_id: int, day: date, user_id: int) -> SelectOfScalar:
        return (
            select(HabitCompletion)
            .where(HabitCompletion.user_id == user_id)
            .where(HabitCompletion.habit_id == habit_id)
            .where(HabitCompletion.day == day)
        )

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_habits(self, *, user_id: int, query: HabitQuery | None = None) -> list[Habit]:
        """List a user's habits filtered and ordered by ``query``."""
        with self.session_factory() as session:
            statement = apply_habit_query(select(Habit).where(Habit.user_id == user_id), query)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit by ID, removing its completions first in the same transaction."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            self._delete_completions(session, habit_id, user_id)
            session.delete(habit)
            session.commit()
            return True

    # Completion ledger operations
    def get_completion(
        self, habit_id: int, day: date, *, user_id: int
    ) -> Optional[HabitCompletion]:
        """Get the completion for a single day."""
        with self.session_factory() as session:
            obj = session.exec(self._completion_statement(habit_id, day, user_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def add_completion(
        self, habit_id: int, day: date, *, user_id: int
    ) -> tuple[HabitCompletion, bool]:
        """Insert a completion unless one exists for that day.

        A concurrent insert of the same (user, habit, day) loses on the unique
        constraint and is reported as the existing row with ``created=False``.
        """
        with self.session_factory() as session:
            existing = session.exec(self._completion_statement(habit_id, day, user_id)).first()
            if existing:
                session.expunge(existing)
                return existing, False

            completion = HabitCompletion(user_id=user_id, habit_id=habit_id, day=day)
            session.add(completion)
            try:
                session.flush()
            except IntegrityError:
                session.rollback()
                existing = session.exec(
                    self._completion_statement(habit_id, day, user_id)
                ).first()
                if existing is None:
                    raise
                session.expunge(existing)
                return existing, False

            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion, True

    def delete_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Delete the completion for a day; returns whether a row was removed."""
        with self.session_factory() as session:
            completion = session.exec(self._completion_statement(habit_id, day, user_id)).first()
            if completion is None:
                return False
            session.delete(completion)
            session.commit()
            return True

    def delete_completions_for_habit(self, habit_id: int, *, user_id: int) -> int:
        """Delete every completion of a habit; returns the number removed."""
        with self.session_factory() as session:
            removed = self._delete_completions(session, habit_id, user_id)
            session.commit()
            return removed

    @staticmethod
    def _delete_completions(session: Session, habit_id: int, user_id: int) -> int:
        result = session.exec(  # type: ignore[call-overload]
            delete(HabitCompletion)
            .where(HabitCompletion.user_id == user_id)
            .where(HabitCompletion.habit_id == habit_id)
        )
        return result.rowcount or 0

    def list_completion_days(
        self,
        habit_id: int,
        *,
        user_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[date]:
        """Completion days for a habit, ascending, optionally bounded (inclusive)."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion.day)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
            )
            if start is not None:
                statement = statement.where(HabitCompletion.day >= start)
            if end is not None:
                statement = statement.where(HabitCompletion.day <= end)
            statement = statement.order_by(HabitCompletion.day.asc())  # type: ignore[attr-defined]
            return list(session.exec(statement).all())

    def completion_days_by_habit(
        self, habit_ids: Sequence[int], *, user_id: int
    ) -> dict[int, list[date]]:
        """Completion days for several habits, grouped by habit id."""
        grouped: dict[int, list[date]] = {habit_id: [] for habit_id in habit_ids}
        if not habit_ids:
            return grouped

        with self.session_factory() as session:
            statement = (
                select(HabitCompletion.habit_id, HabitCompletion.day)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id.in_(habit_ids))  # type: ignore[attr-defined]
                .order_by(HabitCompletion.day.asc())  # type: ignore[attr-defined]
            )
            for habit_id, day in session.exec(statement).all():
                grouped.setdefault(habit_id, []).append(day)
        return grouped
