"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .models.user import User
from .services.auth import UserSession
from .services.habits import Clock, HabitService
from .services.ledger import CompletionLedger, today_utc


@dataclass
class AppContext:
    """Configuration, persistence and services shared by every caller."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    habit_repo: SQLModelHabitRepository
    ledger: CompletionLedger
    habits: HabitService

    def new_session(self, user: Optional[User] = None) -> UserSession:
        """Return a fresh, explicit session object for one caller."""

        return UserSession(self.session_factory, user)


def create_app_context(
    config: Optional[BaseConfig] = None, *, clock: Clock = today_utc
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)
    habit_repo = SQLModelHabitRepository(session_factory)
    ledger = CompletionLedger(habit_repo)
    habits = HabitService(habit_repo, ledger, config, clock=clock)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        ledger=ledger,
        habits=habits,
    )
