"""Flask CLI commands for LifeBoard habits."""

from __future__ import annotations

import functools
import json

import click
from flask import current_app

from .domain.queries import HabitQuery
from .errors import LifeBoardError


def _ctx():
    return current_app.extensions["lifeboard"]


def _signed_in(func):
    """Add --username/--password options and pass a logged-in UserSession."""

    @click.option("--username", envvar="LIFEBOARD_USERNAME", required=True)
    @click.option("--password", envvar="LIFEBOARD_PASSWORD", prompt=True, hide_input=True)
    @functools.wraps(func)
    def wrapper(username: str, password: str, **kwargs):
        session = _ctx().new_session()
        try:
            session.login(username, password)
            return func(session, **kwargs)
        except LifeBoardError as exc:
            raise click.ClickException(str(exc)) from exc
        finally:
            session.logout()

    return wrapper


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("lifeboard-create-user")
    @click.argument("username")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user_command(username: str, password: str) -> None:
        """Create a user account."""

        from .services.auth import create_user

        try:
            user = create_user(
                username=username, password=password, session_factory=_ctx().session_factory
            )
        except LifeBoardError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.username} (id={user.id})")

    @app.cli.command("lifeboard-add-habit")
    @click.argument("name")
    @click.option("--icon", default=None, help="Emoji shown next to the habit")
    @click.option("--color", default=None, help="Color tag")
    @_signed_in
    def add_habit_command(session, name: str, icon: str | None, color: str | None) -> None:
        """Create a habit."""

        habit = _ctx().habits.create_habit(session, {"name": name, "icon": icon, "color": color})
        click.echo(f"Created habit {habit.icon} {habit.name} (id={habit.id})")

    @app.cli.command("lifeboard-habits")
    @click.option("--search", default=None)
    @click.option("--color", default=None)
    @click.option("--sort-by", default="created_at", type=click.Choice(["created_at", "name"]))
    @click.option("--order", default="asc", type=click.Choice(["asc", "desc"]))
    @_signed_in
    def list_habits_command(session, **params) -> None:
        """List habits with their streaks."""

        query = HabitQuery.from_params(params)
        items = _ctx().habits.list_habits(session, query)
        _echo_json({"habits": [item.as_dict() for item in items]})

    @app.cli.command("lifeboard-habit")
    @click.argument("habit_id", type=int)
    @_signed_in
    def habit_detail_command(session, habit_id: int) -> None:
        """Show one habit with its heatmap completions and stats."""

        _echo_json(_ctx().habits.habit_detail(session, habit_id).as_dict())

    @app.cli.command("lifeboard-done")
    @click.argument("habit_id", type=int)
    @click.option("--date", "day", default=None, help="Toggle this ISO date instead of today")
    @_signed_in
    def done_command(session, habit_id: int, day: str | None) -> None:
        """Mark a habit done for today (or toggle another date)."""

        service = _ctx().habits
        if day is None:
            result = service.toggle_today(session, habit_id)
        else:
            result = service.toggle_date(session, habit_id, day)
        _echo_json(result.as_dict())

    @app.cli.command("lifeboard-delete-habit")
    @click.argument("habit_id", type=int)
    @_signed_in
    def delete_habit_command(session, habit_id: int) -> None:
        """Delete a habit and all of its completions."""

        _ctx().habits.delete_habit(session, habit_id)
        click.echo("Habit deleted")
