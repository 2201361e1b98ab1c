"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository, apply_habit_query

__all__ = ["SQLModelHabitRepository", "apply_habit_query"]
