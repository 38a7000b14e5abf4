from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class BearerToken:
    """
    Signed bearer token together with the metadata it carries.

    :ivar token: Encoded token string handed to the client.
    :ivar subject: Username the token was issued for.
    :ivar jti: Unique token identifier (blacklist key).
    :ivar issued_at: Issuance instant (UTC).
    :ivar expires_at: Natural expiry instant (UTC).
    """

    token: str
    subject: str
    jti: str
    issued_at: datetime
    expires_at: datetime


class TokenProvider(Protocol):
    """Port for issuing and checking signed bearer tokens."""

    def issue(self, subject: str, *, claims: dict[str, Any] | None = None) -> BearerToken:
        """Sign a token for ``subject`` that expires after the configured TTL."""
        ...

    def validate(self, token: str) -> str | None:
        """Return the subject when signature and expiry hold, else ``None``."""
        ...

    def subject_of(self, token: str) -> str | None:
        """Return the subject of a well-signed token, ignoring expiry."""
        ...

    def claims_of(self, token: str, *, allow_expired: bool = False) -> dict[str, Any] | None:
        """Return every claim of a well-signed token, or ``None``."""
        ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings remembered in a dict; ``advance`` moves the
    provider's clock so expiry can be exercised without sleeping.
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=15)) -> None:
        self._now = datetime.now(tz=UTC)
        self._ttl = ttl
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def advance(self, delta: timedelta) -> None:
        self._now += delta

    def issue(self, subject: str, *, claims: dict[str, Any] | None = None) -> BearerToken:
        self._seq += 1
        jti = f"jti-{self._seq}"
        token = f"access.{subject}.{jti}"
        expires_at = self._now + self._ttl
        payload: dict[str, Any] = dict(claims or {})
        payload.update(
            {
                "sub": subject,
                "jti": jti,
                "iat": int(self._now.timestamp()),
                "exp": int(expires_at.timestamp()),
            }
        )
        self._issued[token] = payload
        return BearerToken(
            token=token,
            subject=subject,
            jti=jti,
            issued_at=self._now,
            expires_at=expires_at,
        )

    def claims_of(self, token: str, *, allow_expired: bool = False) -> dict[str, Any] | None:
        payload = self._issued.get(token)
        if payload is None:
            return None
        if not allow_expired and payload["exp"] <= int(self._now.timestamp()):
            return None
        return dict(payload)

    def validate(self, token: str) -> str | None:
        claims = self.claims_of(token)
        return str(claims["sub"]) if claims else None

    def subject_of(self, token: str) -> str | None:
        claims = self.claims_of(token, allow_expired=True)
        return str(claims["sub"]) if claims else None
