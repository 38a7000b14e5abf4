"""User repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from biblio.models.user import User
from biblio.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues tokens or decides on account status; it only reads and
    writes rows.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "id": User.id,
            "username": User.username,
            "email": User.email,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {
            "username": User.username,
            "email": User.email,
            "role": User.role,
            "status": User.status,
        }

    def _updatable_fields(self):
        """Profile and administrative fields (password goes through its setter)."""
        return {"email", "first_name", "last_name", "role", "status"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username (surrounding whitespace ignored).

        :param username: Login handle.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return bool(self.session.execute(stmt).first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user: User, new_password: str) -> None:
        """Assign a new raw password (the model hashes it) and flush."""
        user.password = new_password
        self.flush()

    # ---------------------------- Token epoch ----------------------------

    def bump_token_version(self, user_id: int) -> int:
        """
        Increment ``token_version`` with a single UPDATE statement.

        :returns: New token_version after increment.
        :raises ValueError: If the user does not exist.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(token_version=User.token_version + 1)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise ValueError(f"User {user_id} not found.")
        version = self.session.execute(
            select(User.token_version).where(User.id == user_id)
        ).scalar_one()
        user = self.session.get(User, user_id)
        if user is not None:
            # keep the identity map in sync with the UPDATE above
            self.session.expire(user, ["token_version"])
        return int(version)
