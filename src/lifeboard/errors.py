"""Error taxonomy shared by the habit services."""

from __future__ import annotations

from typing import Mapping


class LifeBoardError(Exception):
    """Base class for errors raised by LifeBoard services."""


class ValidationError(LifeBoardError):
    """Input failed validation before anything was written.

    ``errors`` maps a field name (or ``"__root__"``) to its messages.
    """

    def __init__(self, message: str, errors: Mapping[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors: dict[str, list[str]] = dict(errors or {})

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: [message]})


class NotAuthorized(LifeBoardError):
    """The caller does not own the requested resource.

    Surfaced as "not found" so the existence of other users' data is not leaked.
    """

    status_code = 404


class HabitNotFound(NotAuthorized):
    """Habit is missing or belongs to another user."""

    def __init__(self, habit_id: int) -> None:
        super().__init__("Habit not found")
        self.habit_id = habit_id


class NotAuthenticated(LifeBoardError):
    """No user is attached to the current session."""

    status_code = 401


__all__ = [
    "HabitNotFound",
    "LifeBoardError",
    "NotAuthenticated",
    "NotAuthorized",
    "ValidationError",
]
