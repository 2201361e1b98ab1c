"""User accounts and the explicit per-caller session object."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import select

from ..errors import NotAuthenticated, ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger("services.auth")

_hasher = PasswordHasher()


def get_user_by_username(username: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by username."""
    username = username.strip()
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user:
            session.expunge(user)
        return user


def create_user(*, username: str, password: str, session_factory: SessionFactory) -> User:
    """Create a new user with an argon2 password hash."""

    username = (username or "").strip()
    if not username:
        raise ValidationError.for_field("username", "Username is required")
    if not password:
        raise ValidationError.for_field("password", "Password is required")

    if get_user_by_username(username, session_factory) is not None:
        raise ValidationError.for_field("username", "Username already exists")

    password_hash = _hasher.hash(password)
    with session_factory() as session:
        user = User(username=username, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)

    logger.info("User created", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = (username or "").strip()
    if not username:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            return None

        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


class UserSession:
    """The signed-in user for one caller, passed explicitly to every service call.

    ``login`` sets the user, ``logout`` clears it. Nothing is stored globally.
    """

    def __init__(self, session_factory: SessionFactory, user: Optional[User] = None) -> None:
        self.session_factory = session_factory
        self.user = user

    @classmethod
    def for_user(cls, session_factory: SessionFactory, user: User) -> "UserSession":
        return cls(session_factory, user)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.user.id is not None

    def login(self, username: str, password: str) -> User:
        user = authenticate(
            username=username, password=password, session_factory=self.session_factory
        )
        if user is None:
            logger.warning("Login failed", extra={"username": username.strip()})
            raise NotAuthenticated("Invalid username or password")
        self.user = user
        logger.info("User logged in", extra={"user_id": user.id})
        return user

    def logout(self) -> None:
        if self.user is not None:
            logger.info("User logged out", extra={"user_id": self.user.id})
        self.user = None

    def require_user_id(self) -> int:
        """Return the current user id or raise if nobody is signed in."""

        if self.user is None or self.user.id is None:
            raise NotAuthenticated("User is not authenticated")
        return self.user.id


__all__ = [
    "UserSession",
    "authenticate",
    "create_user",
    "get_user_by_username",
]
