"""Service layer public API.

Re-exports
----------
- Base primitives: :class:`BaseService`
- Session core: :class:`SessionService`, :class:`TokenBlacklist`,
  :class:`PasswordResetService`
- Accounts: :class:`AccountService`

Adapters are chosen by the API layer (see ``biblio.api.deps``); nothing in
this package imports ``biblio.infra``.
"""

from __future__ import annotations

from ._shared.base import BaseService
from .accounts import AccountService
from .auth.password_reset import PasswordResetService
from .auth.service import SessionService
from .blacklist import TokenBlacklist

__all__ = [
    "BaseService",
    "SessionService",
    "AccountService",
    "PasswordResetService",
    "TokenBlacklist",
]
