from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RefreshTokenView:
    """
    Read-model for a persisted refresh token.

    :ivar token: Opaque random identifier handed to the client.
    :ivar user_id: Owner user id.
    :ivar expires_at: Absolute expiration (UTC).
    """

    token: str
    user_id: int
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at


def new_refresh_token() -> str:
    """Generate a URL-safe opaque refresh token (256 bits of entropy)."""
    return secrets.token_urlsafe(32)


class RefreshTokenStore(Protocol):
    """
    Stateful store of refresh tokens, at most one per user.

    Implementations participate in the caller's transaction; they never commit.
    """

    def issue(self, user_id: int) -> RefreshTokenView:
        """Replace any token of ``user_id`` with a fresh one and return it."""
        ...

    def find(self, token: str) -> RefreshTokenView | None:
        """Look a token up by its opaque value."""
        ...

    def verify_not_expired(self, view: RefreshTokenView) -> RefreshTokenView | None:
        """Return ``view`` while it is live; delete it and return ``None`` once expired."""
        ...

    def delete_for_user(self, user_id: int) -> int:
        """Delete the user's token (idempotent). :returns: Rows removed."""
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store for unit tests.

    .. note::
       Uses a threading lock to keep replace-on-issue atomic.
    """

    def __init__(self, ttl: timedelta = timedelta(days=7)) -> None:
        self._ttl = ttl
        self._by_token: dict[str, RefreshTokenView] = {}
        self._by_user: dict[int, str] = {}
        self._lock = threading.Lock()

    def issue(self, user_id: int) -> RefreshTokenView:
        with self._lock:
            old = self._by_user.pop(user_id, None)
            if old is not None:
                self._by_token.pop(old, None)
            view = RefreshTokenView(
                token=new_refresh_token(),
                user_id=user_id,
                expires_at=datetime.now(UTC) + self._ttl,
            )
            self._by_token[view.token] = view
            self._by_user[user_id] = view.token
            return view

    def find(self, token: str) -> RefreshTokenView | None:
        return self._by_token.get(token)

    def verify_not_expired(self, view: RefreshTokenView) -> RefreshTokenView | None:
        if not view.is_expired():
            return view
        with self._lock:
            if self._by_token.pop(view.token, None) is not None:
                self._by_user.pop(view.user_id, None)
        return None

    def delete_for_user(self, user_id: int) -> int:
        with self._lock:
            token = self._by_user.pop(user_id, None)
            if token is None:
                return 0
            self._by_token.pop(token, None)
            return 1

    # test helper
    def expire(self, token: str) -> None:
        """Force a stored token into the past."""
        view = self._by_token[token]
        self._by_token[token] = RefreshTokenView(
            token=view.token,
            user_id=view.user_id,
            expires_at=datetime.now(UTC) - timedelta(seconds=1),
        )
