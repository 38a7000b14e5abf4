"""Tests for the blacklist store adapters (database, Redis, in-memory)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from biblio.infra.db.sqlalchemy_blacklist_store import SQLAlchemyTokenBlacklistStore
from biblio.infra.redis.redis_blacklist_store import RedisTokenBlacklistStore
from biblio.services._shared.ports import InMemoryTokenBlacklistStore


def _in(minutes: int) -> datetime:
    return datetime.now(UTC) + timedelta(minutes=minutes)


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    yield r
    r.flushall()


class TestSQLAlchemyTokenBlacklistStore:
    def test_add_then_contains(self, session):
        store = SQLAlchemyTokenBlacklistStore()
        assert store.contains("jti-1") is False

        store.add(jti="jti-1", expires_at=_in(10))

        assert store.contains("jti-1") is True
        assert store.contains("jti-2") is False

    def test_add_is_idempotent(self, session):
        store = SQLAlchemyTokenBlacklistStore()
        store.add(jti="jti-1", expires_at=_in(10))
        store.add(jti="jti-1", expires_at=_in(10))

        assert store.contains("jti-1") is True

    def test_prune_removes_only_expired_entries(self, session):
        store = SQLAlchemyTokenBlacklistStore()
        store.add(jti="old", expires_at=_in(-5))
        store.add(jti="live", expires_at=_in(5))

        assert store.prune(datetime.now(UTC)) == 1
        assert store.contains("old") is False
        assert store.contains("live") is True


class TestRedisTokenBlacklistStore:
    def test_add_sets_marker_with_remaining_ttl(self, fake_redis):
        store = RedisTokenBlacklistStore(fake_redis)

        store.add(jti="jti-1", expires_at=_in(10))

        assert store.contains("jti-1") is True
        ttl = fake_redis.ttl("bl:at:jti-1")
        assert 0 < ttl <= 600

    def test_already_expired_token_gets_minimal_ttl(self, fake_redis):
        store = RedisTokenBlacklistStore(fake_redis)

        store.add(jti="jti-1", expires_at=_in(-10))

        assert fake_redis.ttl("bl:at:jti-1") == 1

    def test_unknown_jti_is_not_contained(self, fake_redis):
        assert RedisTokenBlacklistStore(fake_redis).contains("nope") is False

    def test_prune_is_a_noop(self, fake_redis):
        store = RedisTokenBlacklistStore(fake_redis)
        store.add(jti="jti-1", expires_at=_in(10))

        assert store.prune(datetime.now(UTC)) == 0
        assert store.contains("jti-1") is True


class TestInMemoryTokenBlacklistStore:
    def test_prune(self):
        store = InMemoryTokenBlacklistStore()
        store.add(jti="old", expires_at=_in(-1))
        store.add(jti="live", expires_at=_in(1))

        assert store.prune() == 1
        assert store.contains("live") and not store.contains("old")
