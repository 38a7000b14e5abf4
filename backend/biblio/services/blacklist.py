"""Bearer token blacklist: tokens invalidated before their natural expiry."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from biblio.services._shared.ports import TokenBlacklistStore, TokenProvider

log = logging.getLogger(__name__)


class TokenBlacklist:
    """
    Record and query blacklisted bearer tokens.

    Tokens are identified by their ``jti`` claim and remembered until their
    ``exp``; a token that cannot be decoded at all is already rejected by
    signature checks, so it is never stored.

    :param tokens: Token provider used to read ``jti``/``exp``.
    :param store: Shared blacklist store (database or Redis).
    """

    def __init__(self, *, tokens: TokenProvider, store: TokenBlacklistStore) -> None:
        self.tokens = tokens
        self.store = store

    def blacklist(self, token: str) -> bool:
        """
        Blacklist ``token`` until its expiry. Idempotent.

        :returns: ``True`` when the token was well-signed and is now recorded.
        """
        claims = self.tokens.claims_of(token, allow_expired=True)
        if not claims or not claims.get("jti"):
            return False
        expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
        self.store.add(jti=str(claims["jti"]), expires_at=expires_at)
        return True

    def is_blacklisted(self, token: str) -> bool:
        claims = self.tokens.claims_of(token, allow_expired=True)
        if not claims or not claims.get("jti"):
            return False
        return self.store.contains(str(claims["jti"]))

    def is_jti_blacklisted(self, jti: str) -> bool:
        return self.store.contains(jti)

    def prune(self, now: datetime | None = None) -> int:
        """Remove entries whose token already expired. :returns: Entries removed."""
        removed = self.store.prune(now or datetime.now(UTC))
        if removed:
            log.info("Pruned %d expired blacklist entries", removed)
        return removed
