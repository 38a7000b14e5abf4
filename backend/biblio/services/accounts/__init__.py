"""Account self-service and administration."""

from biblio.services.accounts.dto import PasswordChangeIn, ProfileUpdateIn, UserListOut, UserOut
from biblio.services.accounts.service import AccountService

__all__ = ["AccountService", "PasswordChangeIn", "ProfileUpdateIn", "UserListOut", "UserOut"]
