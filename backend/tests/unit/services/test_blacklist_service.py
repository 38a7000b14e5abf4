"""Tests for TokenBlacklist (pure unit tests, no database)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from biblio.services._shared.ports import InMemoryTokenBlacklistStore, StubTokenProvider
from biblio.services.blacklist import TokenBlacklist


@pytest.fixture()
def tokens():
    return StubTokenProvider(ttl=timedelta(minutes=5))


@pytest.fixture()
def store():
    return InMemoryTokenBlacklistStore()


@pytest.fixture()
def blacklist(tokens, store):
    return TokenBlacklist(tokens=tokens, store=store)


def test_blacklist_records_jti(blacklist, tokens, store):
    bearer = tokens.issue("alice")

    assert blacklist.blacklist(bearer.token) is True
    assert store.contains(bearer.jti)
    assert blacklist.is_blacklisted(bearer.token) is True
    assert blacklist.is_jti_blacklisted(bearer.jti) is True


def test_blacklist_is_idempotent(blacklist, tokens):
    bearer = tokens.issue("alice")
    assert blacklist.blacklist(bearer.token) is True
    assert blacklist.blacklist(bearer.token) is True
    assert blacklist.is_blacklisted(bearer.token) is True


def test_other_tokens_unaffected(blacklist, tokens):
    first = tokens.issue("alice")
    second = tokens.issue("alice")
    blacklist.blacklist(first.token)
    assert blacklist.is_blacklisted(second.token) is False


def test_undecodable_token_is_not_stored(blacklist, store):
    assert blacklist.blacklist("garbage") is False
    assert blacklist.is_blacklisted("garbage") is False
    assert store.prune(datetime.now(UTC) + timedelta(days=365)) == 0


def test_expired_token_can_still_be_blacklisted(blacklist, tokens):
    bearer = tokens.issue("alice")
    tokens.advance(timedelta(minutes=10))
    assert blacklist.blacklist(bearer.token) is True
    assert blacklist.is_blacklisted(bearer.token) is True


def test_prune_drops_entries_past_expiry(blacklist, tokens):
    bearer = tokens.issue("alice")
    blacklist.blacklist(bearer.token)

    assert blacklist.prune(bearer.expires_at - timedelta(seconds=1)) == 0
    assert blacklist.prune(bearer.expires_at + timedelta(seconds=1)) == 1
    assert blacklist.is_jti_blacklisted(bearer.jti) is False
