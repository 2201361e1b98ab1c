"""Explicit query specifications for listing user data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import ValidationError

HABIT_ORDER_FIELDS = ("created_at", "name")


@dataclass(frozen=True)
class HabitQuery:
    """Named optional filters for a habit listing.

    Every field maps to exactly one predicate or ordering clause; ``None``
    means "no constraint".
    """

    search: Optional[str] = None
    color: Optional[str] = None
    order_by: str = "created_at"
    descending: bool = False

    def __post_init__(self) -> None:
        if self.order_by not in HABIT_ORDER_FIELDS:
            raise ValidationError.for_field(
                "order_by",
                f"order_by must be one of {', '.join(HABIT_ORDER_FIELDS)}",
            )
        # Blank filters from a form or query string mean "not provided"
        if self.search is not None and not self.search.strip():
            object.__setattr__(self, "search", None)
        if self.color is not None and not self.color.strip():
            object.__setattr__(self, "color", None)

    @classmethod
    def from_params(cls, params: dict) -> "HabitQuery":
        """Build a query from loosely-typed request parameters."""

        order = str(params.get("order", "asc")).strip().lower()
        if order not in {"asc", "desc"}:
            raise ValidationError.for_field("order", "order must be 'asc' or 'desc'")
        return cls(
            search=params.get("search"),
            color=params.get("color"),
            order_by=str(params.get("sort_by") or "created_at").strip(),
            descending=order == "desc",
        )
