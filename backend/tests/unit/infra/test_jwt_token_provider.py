"""Tests for the Flask-JWT-Extended token provider."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from biblio.infra.jwt.flask_jwt_token_provider import JWTTokenProvider


@pytest.fixture()
def provider(app):
    with app.app_context():
        yield JWTTokenProvider()


class TestJWTTokenProvider:
    def test_issued_token_validates_to_its_subject(self, provider):
        bearer = provider.issue("alice", claims={"role": "MEMBER", "tv": 1})

        assert bearer.subject == "alice"
        assert bearer.jti
        assert provider.validate(bearer.token) == "alice"

    def test_expiry_follows_configured_ttl(self, app, provider):
        bearer = provider.issue("alice")
        ttl = app.config["JWT_ACCESS_TOKEN_EXPIRES"]
        assert bearer.expires_at - bearer.issued_at == ttl

    def test_claims_carry_role_and_token_version(self, provider):
        bearer = provider.issue("alice", claims={"role": "ADMIN", "tv": 3})
        claims = provider.claims_of(bearer.token)

        assert claims["sub"] == "alice"
        assert claims["role"] == "ADMIN"
        assert claims["tv"] == 3
        assert claims["jti"] == bearer.jti

    def test_each_issue_gets_a_distinct_jti(self, provider):
        assert provider.issue("alice").jti != provider.issue("alice").jti

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
    def test_malformed_tokens_are_rejected_uniformly(self, provider, garbage):
        assert provider.validate(garbage) is None
        assert provider.subject_of(garbage) is None

    def test_tampered_signature_is_rejected(self, provider):
        token = provider.issue("alice").token
        head, payload, sig = token.split(".")
        forged = ".".join([head, payload, ("A" if sig[0] != "A" else "B") + sig[1:]])

        assert provider.validate(forged) is None
        assert provider.subject_of(forged) is None

    def test_token_signed_with_other_key_is_rejected(self, app, provider):
        token = provider.issue("alice").token
        original = app.config["JWT_SECRET_KEY"]
        app.config["JWT_SECRET_KEY"] = "another-secret-key-with-enough-length-for-hs256"
        try:
            assert provider.validate(token) is None
        finally:
            app.config["JWT_SECRET_KEY"] = original

    def test_expired_token_fails_validate_but_keeps_subject(self, app, provider):
        issued = datetime.now(UTC)
        with freeze_time(issued):
            token = provider.issue("alice").token

        later = issued + app.config["JWT_ACCESS_TOKEN_EXPIRES"] + timedelta(minutes=1)
        with freeze_time(later):
            assert provider.validate(token) is None
            assert provider.subject_of(token) == "alice"
            assert provider.claims_of(token) is None
            assert provider.claims_of(token, allow_expired=True)["sub"] == "alice"
