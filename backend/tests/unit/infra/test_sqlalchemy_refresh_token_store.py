"""Tests for the database-backed refresh token store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from biblio.infra.db.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from biblio.models.token import RefreshToken
from tests.factories.user import UserFactory


@pytest.fixture()
def store(session):
    return SQLAlchemyRefreshTokenStore()


def _rows_for(session, user_id: int) -> int:
    stmt = select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == user_id)
    return int(session.execute(stmt).scalar_one())


class TestSQLAlchemyRefreshTokenStore:
    def test_issue_persists_a_findable_token(self, store, session):
        user = UserFactory()

        view = store.issue(user.id)
        found = store.find(view.token)

        assert found is not None
        assert found.user_id == user.id
        assert found.expires_at > datetime.now(UTC)

    def test_issue_uses_configured_ttl(self, app, store):
        user = UserFactory()
        before = datetime.now(UTC)

        view = store.issue(user.id)

        expected = before + app.config["REFRESH_TOKEN_EXPIRES"]
        assert abs((view.expires_at - expected).total_seconds()) < 5

    def test_second_issue_replaces_the_first(self, store, session):
        user = UserFactory()

        first = store.issue(user.id)
        second = store.issue(user.id)

        assert first.token != second.token
        assert store.find(first.token) is None
        assert store.find(second.token) is not None
        assert _rows_for(session, user.id) == 1

    def test_tokens_of_other_users_are_untouched(self, store):
        alice, bob = UserFactory(), UserFactory()
        alice_rt = store.issue(alice.id)

        store.issue(bob.id)

        assert store.find(alice_rt.token) is not None

    def test_find_unknown_or_empty_returns_none(self, store):
        assert store.find("does-not-exist") is None
        assert store.find("") is None

    def test_live_token_passes_expiry_check(self, store):
        user = UserFactory()
        view = store.issue(user.id)

        assert store.verify_not_expired(view) == view

    def test_expired_token_is_deleted_on_check(self, session):
        user = UserFactory()
        store = SQLAlchemyRefreshTokenStore(ttl=timedelta(seconds=-1))
        view = store.issue(user.id)

        assert store.verify_not_expired(view) is None
        assert store.find(view.token) is None
        assert _rows_for(session, user.id) == 0

    def test_delete_for_user_is_idempotent(self, store, session):
        user = UserFactory()
        store.issue(user.id)

        assert store.delete_for_user(user.id) == 1
        assert store.delete_for_user(user.id) == 0
        assert _rows_for(session, user.id) == 0
