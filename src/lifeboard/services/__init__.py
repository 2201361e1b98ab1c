"""Service module exports."""

from . import auth, habits, ledger, streaks

__all__ = [
    "auth",
    "habits",
    "ledger",
    "streaks",
]
