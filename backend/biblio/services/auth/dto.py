# biblio/services/auth/dto.py
from __future__ import annotations

import enum
from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login handle.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param username: Desired login handle (3..50 chars, validated upstream).
    :param email: Contact email.
    :param password: Raw password.
    :param first_name: Optional given name.
    :param last_name: Optional family name.
    """

    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param token: Encoded bearer token (may already be expired).
    :type token: str
    :param all_sessions: If True, invalidate every bearer token of the user.
    :type all_sessions: bool
    """

    token: str
    all_sessions: bool = False


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    Tokens plus the public identity of the signed-in user.

    :param token: Encoded bearer token.
    :param refresh_token: Opaque refresh token.
    :param role: Role name without prefix (e.g. ``"MEMBER"``).
    """

    token: str
    refresh_token: str
    username: str
    email: str
    role: str
    first_name: str | None
    last_name: str | None


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller resolved from a bearer token.

    Passed explicitly to every operation that needs to know who is calling.
    """

    user_id: int
    username: str
    role: str
    token: str

    def has_role(self, *roles: str) -> bool:
        return self.role in roles


# --------------------------- Failures ------------------------------------- #


class FailureKind(enum.Enum):
    """Expected, non-exceptional authentication outcomes."""

    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_NOT_ACTIVE = "account_not_active"
    DUPLICATE_IDENTITY = "duplicate_identity"
    TOKEN_INVALID = "token_invalid"
    REFRESH_TOKEN_NOT_FOUND = "refresh_token_not_found"
    REFRESH_TOKEN_EXPIRED = "refresh_token_expired"


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """
    Tagged failure result returned instead of a success DTO.

    :param kind: Failure category, mapped to an HTTP status by the API layer.
    :param message: Client-safe message.
    :param field: Offending field for duplicate-identity failures.
    """

    kind: FailureKind
    message: str
    field: str | None = None
