"""Pytest configuration and shared fixtures for LifeBoard tests.

Every test runs against its own temporary SQLite database and a fixed
"today" so streak assertions never depend on the wall clock.
"""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import pytest

from lifeboard.config import TestingConfig
from lifeboard.infra.database import create_db_engine, create_session_factory, init_database
from lifeboard.infra.repositories import SQLModelHabitRepository
from lifeboard.models import Habit, User
from lifeboard.services.auth import UserSession, create_user
from lifeboard.services.habits import HabitService
from lifeboard.services.ledger import CompletionLedger

TODAY = date(2024, 3, 15)

_LIFEBOARD_ENV = (
    "LIFEBOARD_DATABASE_URL",
    "LIFEBOARD_SECRET_KEY",
    "LIFEBOARD_DEV_MODE",
    "LIFEBOARD_COMPLETION_POLICY",
    "LIFEBOARD_ALLOW_FUTURE_COMPLETIONS",
    "LIFEBOARD_HEATMAP_DAYS",
    "LIFEBOARD_USERNAME",
    "LIFEBOARD_PASSWORD",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory at a temp folder and drop any LIFEBOARD_* overrides."""

    for name in _LIFEBOARD_ENV:
        monkeypatch.delenv(name, raising=False)
    data_dir = tmp_path / "instance"
    monkeypatch.setenv("LIFEBOARD_DATA_DIR", str(data_dir))
    return data_dir


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestingConfig:
    """Testing config backed by a throwaway SQLite file."""

    monkeypatch.setenv("LIFEBOARD_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    return TestingConfig()


@pytest.fixture
def db_engine(config):
    """Engine with all tables created; disposed after the test."""

    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Transactional session scopes, as used by the repositories."""

    return create_session_factory(db_engine)


@pytest.fixture
def repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def ledger(repo) -> CompletionLedger:
    return CompletionLedger(repo)


@pytest.fixture
def habit_service(repo, ledger, config) -> HabitService:
    """Service whose clock is pinned to ``TODAY``."""

    return HabitService(repo, ledger, config, clock=lambda: TODAY)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(session_factory) -> User:
    return create_user(username="tester", password="s3cret", session_factory=session_factory)


@pytest.fixture
def other_user(session_factory) -> User:
    return create_user(username="intruder", password="h4ck", session_factory=session_factory)


@pytest.fixture
def user_session(session_factory, user) -> UserSession:
    return UserSession(session_factory, user)


@pytest.fixture
def other_session(session_factory, other_user) -> UserSession:
    return UserSession(session_factory, other_user)


@pytest.fixture
def habit_factory(repo, user):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates Habit rows for ``owner`` (default: ``user``)
    """

    def _create_habit(
        name: str = "Test Habit",
        icon: str = "🔥",
        color: str = "emerald",
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        return repo.create(Habit(user_id=owner.id, name=name, icon=icon, color=color), user_id=owner.id)

    return _create_habit


@pytest.fixture
def mark_days(repo, user):
    """Record completions ``offset`` days before ``TODAY`` (negative offsets are future days)."""

    def _mark(habit: Habit, *offsets: int, owner: User | None = None) -> list[date]:
        owner = owner or user
        days = [TODAY - timedelta(days=offset) for offset in offsets]
        for day in days:
            repo.add_completion(habit.id, day, user_id=owner.id)
        return days

    return _mark


@pytest.fixture
def today() -> date:
    return TODAY
