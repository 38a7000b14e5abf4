from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]


class RedisTokenBlacklistStore:
    """
    Blacklist for **bearer tokens** by jti.

    Each entry is a small marker whose TTL equals the token's remaining life,
    so Redis expires entries on its own.
    """

    def __init__(self, r: redis.Redis, prefix: str = "bl:at:"):
        self.r = r
        self.prefix = prefix

    def _k(self, jti: str) -> str:
        return f"{self.prefix}{jti}"

    def contains(self, jti: str) -> bool:
        return cast(int, self.r.exists(self._k(jti))) == 1

    def add(self, *, jti: str, expires_at: datetime) -> None:
        now = datetime.now(UTC).timestamp()
        ttl = max(1, int(expires_at.timestamp() - now))
        # store a small marker with TTL; idempotent
        self.r.set(self._k(jti), "1", ex=ttl)

    def prune(self, now: datetime) -> int:
        """Redis evicts entries through their TTL; nothing is left to remove."""
        return 0
