# biblio/services/accounts/dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from biblio.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update; ``None`` leaves a field unchanged.

    :param first_name: New given name.
    :param last_name: New family name.
    :param email: New contact email (must stay unique).
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Password change request.

    :param current_password: Password the caller signs in with today.
    :param new_password: Replacement password.
    :param confirm_password: When given, must equal ``new_password``.
    """

    current_password: str
    new_password: str
    confirm_password: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public view of an account."""

    id: int
    username: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    status: str

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            status=user.status.value,
        )


@dataclass(frozen=True, slots=True)
class UserListOut:
    """One page of accounts plus pagination metadata."""

    items: Sequence[UserOut]
    total: int
    page: int
    limit: int
