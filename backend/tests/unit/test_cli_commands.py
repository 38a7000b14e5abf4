"""Tests for the ``flask seed`` and ``flask auth`` command groups."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select

from biblio.cli.seed import ensure_admin
from biblio.infra.db.sqlalchemy_blacklist_store import SQLAlchemyTokenBlacklistStore
from biblio.models.token import BlacklistedToken
from biblio.models.user import Role, User


def test_ensure_admin_is_idempotent(session):
    user, created = ensure_admin("root", "root@example.com", "admin123")
    assert created is True
    assert user.role is Role.ADMIN
    assert user.verify_password("admin123")

    again, created_again = ensure_admin("root", "other@example.com", "ignored")
    assert created_again is False
    assert again.id == user.id


def test_seed_admin_command_uses_config_defaults(app, session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "admin"])
    second = runner.invoke(args=["seed", "admin"])

    assert first.exit_code == 0, first.output
    assert "created" in first.output
    assert "already exists" in second.output
    count = session.execute(
        select(func.count(User.id)).where(User.username == app.config["ADMIN_USERNAME"])
    ).scalar_one()
    assert count == 1


def test_seed_admin_command_with_options(app, session):
    result = app.test_cli_runner().invoke(
        args=["seed", "admin", "--username", "chief", "--email", "chief@example.com"]
    )

    assert result.exit_code == 0, result.output
    user = session.execute(select(User).where(User.username == "chief")).scalar_one()
    assert user.email == "chief@example.com"
    assert user.verify_password(app.config["ADMIN_PASSWORD"])


def test_prune_blacklist_command(app, session):
    store = SQLAlchemyTokenBlacklistStore()
    now = datetime.now(UTC)
    store.add(jti="stale", expires_at=now - timedelta(minutes=1))
    store.add(jti="live", expires_at=now + timedelta(hours=1))
    session.commit()

    result = app.test_cli_runner().invoke(args=["auth", "prune-blacklist"])

    assert result.exit_code == 0, result.output
    assert "Removed 1 expired blacklist entries." in result.output
    remaining = session.execute(select(BlacklistedToken.jti)).scalars().all()
    assert remaining == ["live"]
