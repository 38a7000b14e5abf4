"""Flask CLI commands for idempotent database seeding."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from biblio.models.user import Role, Status, User
from biblio.services._shared.base import BaseService

LOGGER = logging.getLogger(__name__)


def ensure_admin(username: str, email: str, password: str) -> tuple[User, bool]:
    """
    Create the administrator account unless a user with that username exists.

    :returns: ``(user, created)``.
    """
    with BaseService().rw_uow() as uow:
        existing = uow.users.get_by_username(username)
        if existing is not None:
            return existing, False
        user = User(
            username=username,
            email=email,
            first_name="System",
            last_name="Administrator",
            role=Role.ADMIN,
            status=Status.ACTIVE,
        )
        user.password = password
        uow.users.add(user)
    return user, True


@click.group("seed")
def seed_cli() -> None:
    """Collection of database seeding commands."""


@seed_cli.command("admin")
@click.option("--username", default=None, help="Defaults to ADMIN_USERNAME.")
@click.option("--email", default=None, help="Defaults to ADMIN_EMAIL.")
@click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD.")
@with_appcontext
def admin_command(username: str | None, email: str | None, password: str | None) -> None:
    """Create the default administrator (no-op when it already exists)."""
    cfg = current_app.config
    username = username or cfg["ADMIN_USERNAME"]
    _, created = ensure_admin(
        username,
        email or cfg["ADMIN_EMAIL"],
        password or cfg["ADMIN_PASSWORD"],
    )
    if created:
        LOGGER.info("Administrator created", extra={"username": username})
        click.echo(f"Administrator '{username}' created.")
    else:
        click.echo(f"Administrator '{username}' already exists.")
