"""Habit and completion-ledger tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Habit(SQLModel, table=True):
    """A user-defined habit tracked once per calendar day."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    icon: str = Field(default="🔥", max_length=16)
    color: str = Field(default="emerald", max_length=32, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    completions: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship("HabitCompletion", back_populates="habit"),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitCompletion(SQLModel, table=True):
    """Fact that a habit was done on one UTC calendar day.

    ``day`` is the dedup key: one row per (user, habit, day) no matter when
    during that day it was recorded.
    """

    __tablename__: ClassVar[str] = "habit_completion"
    __table_args__ = (
        UniqueConstraint("user_id", "habit_id", "day", name="uq_completion_user_habit_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    day: date = Field(nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )
