from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class TokenBlacklistStore(Protocol):
    """
    Abstraction for a blacklist of **bearer tokens** keyed by ``jti``.

    Entries are kept until the token's natural expiry; methods are idempotent.
    Production adapters MUST be shared across serving processes.
    """

    def add(self, *, jti: str, expires_at: datetime) -> None: ...
    def contains(self, jti: str) -> bool: ...
    def prune(self, now: datetime) -> int: ...


class InMemoryTokenBlacklistStore(TokenBlacklistStore):
    """Process-local blacklist used as a unit-test double."""

    def __init__(self) -> None:
        self._entries: dict[str, datetime] = {}

    def add(self, *, jti: str, expires_at: datetime) -> None:
        self._entries[jti] = expires_at

    def contains(self, jti: str) -> bool:
        return jti in self._entries

    def prune(self, now: datetime | None = None) -> int:
        cutoff = now or datetime.now(UTC)
        stale = [jti for jti, exp in self._entries.items() if exp <= cutoff]
        for jti in stale:
            del self._entries[jti]
        return len(stale)
