"""
biblio.services._shared.ports
=============================

*Ports* (hexagonal interfaces) for the session core.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` signs and checks bearer tokens.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` persists one opaque refresh token per user.

- :mod:`blacklist_store`:
    :class:`~.TokenBlacklistStore` records bearer tokens invalidated on logout.

Concrete adapters (database, Redis, Flask-JWT-Extended) live under
``biblio.infra``; the in-memory classes here are unit-test doubles.
"""

from __future__ import annotations

from .blacklist_store import InMemoryTokenBlacklistStore, TokenBlacklistStore
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_token,
)
from .token_provider import BearerToken, StubTokenProvider, TokenProvider

__all__ = [
    "BearerToken",
    "TokenProvider",
    "StubTokenProvider",
    "RefreshTokenStore",
    "RefreshTokenView",
    "InMemoryRefreshTokenStore",
    "new_refresh_token",
    "TokenBlacklistStore",
    "InMemoryTokenBlacklistStore",
]
