from biblio.models.token import BlacklistedToken, RefreshToken
from biblio.models.user import Role, Status, User

__all__ = [
    "BlacklistedToken",
    "RefreshToken",
    "Role",
    "Status",
    "User",
]
