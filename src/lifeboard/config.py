"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

COMPLETION_POLICIES = ("one_way", "toggle")
MAX_HEATMAP_DAYS = 3650


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default`` when unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "LifeBoard"
    DB_FILENAME = "lifeboard.db"
    DEFAULT_HABIT_ICON = "🔥"
    DEFAULT_HABIT_COLOR = "emerald"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("LIFEBOARD_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("LIFEBOARD_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("LIFEBOARD_DATABASE_URL", self._build_sqlite_url())
        self.COMPLETION_POLICY = (
            os.getenv("LIFEBOARD_COMPLETION_POLICY", "one_way").strip().lower()
        )
        self.ALLOW_FUTURE_COMPLETIONS = _env_bool(
            "LIFEBOARD_ALLOW_FUTURE_COMPLETIONS", default=False
        )
        self.HEATMAP_DAYS = _env_int("LIFEBOARD_HEATMAP_DAYS", 365)

        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("LIFEBOARD_SECRET_KEY must be set in non-dev mode.")
        if self.COMPLETION_POLICY not in COMPLETION_POLICIES:
            raise ValueError(
                f"LIFEBOARD_COMPLETION_POLICY must be one of {', '.join(COMPLETION_POLICIES)}; "
                f"got {self.COMPLETION_POLICY!r}"
            )
        if not 1 <= self.HEATMAP_DAYS <= MAX_HEATMAP_DAYS:
            raise ValueError(f"LIFEBOARD_HEATMAP_DAYS must be between 1 and {MAX_HEATMAP_DAYS}.")

    @property
    def one_way_completions(self) -> bool:
        """True when a completion for today can never be unmarked."""

        return self.COMPLETION_POLICY == "one_way"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("LIFEBOARD_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestingConfig(BaseConfig):
    """Configuration for the test-suite; callers point DATABASE_URL at a temp file."""

    TESTING = True
