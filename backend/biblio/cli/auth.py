"""Flask CLI commands for session maintenance."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from biblio.services._shared.base import BaseService


@click.group("auth")
def auth_cli() -> None:
    """Session maintenance commands."""


@auth_cli.command("prune-blacklist")
@with_appcontext
def prune_blacklist_command() -> None:
    """Delete blacklist entries whose token has already expired."""
    from biblio.api.deps import build_blacklist

    with BaseService().rw_uow():
        removed = build_blacklist().prune()
    click.echo(f"Removed {removed} expired blacklist entries.")
