"""Input models for habit operations."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


class HabitForm(BaseModel):
    """Payload for creating a habit."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_default=True, extra="ignore")

    name: str = Field(default="", description="Short label for the habit", max_length=80)
    icon: Optional[str] = Field(default=None, description="Single emoji or glyph", max_length=16)
    color: Optional[str] = Field(default=None, description="Color tag", max_length=32)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Habit name is required")
        return value

    @field_validator("icon", "color")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        """Treat empty strings as "use the default"."""

        if value is not None and not value.strip():
            return None
        return value


class ToggleDateForm(BaseModel):
    """Payload for toggling an arbitrary day."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_default=True, extra="ignore")

    date: str = Field(default="", description="ISO date or timestamp")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> str:
        if value is None:
            return ""
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        if not value:
            raise ValueError("date is required")
        return value


def structured_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{field: [messages]}``."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes custom validator messages with "Value error, "
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        structured.setdefault(key, []).append(message)
    return structured


def parse_form(model: type[BaseModel], payload: dict[str, Any] | None):
    """Validate ``payload`` against ``model`` or raise our ``ValidationError``."""

    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as exc:
        errors = structured_errors(exc)
        first = next(iter(errors.values()), ["Invalid input"])[0]
        raise ValidationError(first, errors) from exc


__all__ = ["HabitForm", "ToggleDateForm", "parse_form", "structured_errors"]
