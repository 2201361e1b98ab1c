"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository

__all__ = ["HabitRepository"]
