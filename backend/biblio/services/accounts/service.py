# biblio/services/accounts/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from biblio.models.user import Role, Status, User
from biblio.repositories.user import UserRepository
from biblio.services._shared.base import BaseService
from biblio.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailed,
    violates,
)
from biblio.services._shared.ports import RefreshTokenStore
from biblio.services.accounts.dto import (
    PasswordChangeIn,
    ProfileUpdateIn,
    UserListOut,
    UserOut,
)
from biblio.services.auth.dto import Principal

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountService(BaseService):
    """
    Profile self-service and administrative account management.

    Role checks happen at the HTTP boundary; this service assumes the caller
    is allowed to run the operation it invokes.
    """

    def __init__(self, *, refresh_store: RefreshTokenStore) -> None:
        super().__init__()
        self.refresh_store = refresh_store

    # ------------------------------------------------------------------ #
    # Self-service
    # ------------------------------------------------------------------ #

    def get_profile(self, principal: Principal) -> UserOut:
        with self.ro_uow() as uow:
            return UserOut.from_model(self._require(uow.users, principal.user_id))

    def update_profile(self, principal: Principal, dto: ProfileUpdateIn) -> UserOut:
        """
        Apply a partial profile update.

        :raises ConflictError: If the new email belongs to another account.
        """
        try:
            with self.rw_uow() as uow:
                user = self._require(uow.users, principal.user_id)
                fields: dict[str, str] = {}
                if dto.email is not None and dto.email.strip().lower() != user.email:
                    if uow.users.exists_by_email(dto.email):
                        raise ConflictError("User", "Email already exists")
                    fields["email"] = dto.email
                if dto.first_name is not None:
                    fields["first_name"] = dto.first_name
                if dto.last_name is not None:
                    fields["last_name"] = dto.last_name
                if fields:
                    uow.users.update(user, **fields)
                out = UserOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", "Email already exists") from exc
            raise
        return out

    def change_password(self, principal: Principal, dto: PasswordChangeIn) -> None:
        """
        Replace the caller's password after re-checking the current one.

        :raises ValidationFailed: On wrong current password, mismatch, or a
            new password shorter than ``MIN_PASSWORD_LENGTH``.
        """
        if dto.confirm_password is not None and dto.new_password != dto.confirm_password:
            raise ValidationFailed("New password and confirmation do not match")
        if len(dto.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        with self.rw_uow() as uow:
            user = self._require(uow.users, principal.user_id)
            if not user.verify_password(dto.current_password):
                raise ValidationFailed("Current password is incorrect")
            uow.users.update_password(user, dto.new_password)
        log.info("account.password_changed", extra={"user_id": principal.user_id})

    # ------------------------------------------------------------------ #
    # Administration
    # ------------------------------------------------------------------ #

    def list_users(self, *, page: int = 1, limit: int = 10) -> UserListOut:
        pagination = self.ensure_pagination(page=page, limit=limit, sort=["id"])
        with self.ro_uow() as uow:
            result = uow.users.paginate(pagination)
            items = [UserOut.from_model(u) for u in result.items]
        return UserListOut(
            items=items, total=result.total, page=pagination.page, limit=pagination.limit
        )

    def delete_user(self, user_id: int) -> None:
        with self.rw_uow() as uow:
            user = self._require(uow.users, user_id)
            self.refresh_store.delete_for_user(user.id)
            uow.users.delete(user)
        log.info("account.deleted", extra={"user_id": user_id})

    def set_status(self, user_id: int, status: Status) -> UserOut:
        """
        Change an account's status.

        Leaving ``ACTIVE`` drops the refresh token; bearer tokens stop working
        on their own because only ACTIVE owners authenticate.
        """
        with self.rw_uow() as uow:
            user = self._require(uow.users, user_id)
            uow.users.update(user, status=status)
            if status is not Status.ACTIVE:
                self.refresh_store.delete_for_user(user.id)
            out = UserOut.from_model(user)
        log.info("account.status_changed", extra={"user_id": user_id, "reason": status.value})
        return out

    def block_user(self, user_id: int) -> UserOut:
        return self.set_status(user_id, Status.BLOCKED)

    def unblock_user(self, user_id: int) -> UserOut:
        return self.set_status(user_id, Status.ACTIVE)

    def set_role(self, user_id: int, role: str) -> UserOut:
        """
        :raises ValidationFailed: If ``role`` is not a known role name.
        """
        try:
            new_role = Role(str(role).strip().upper().removeprefix("ROLE_"))
        except ValueError as exc:
            raise ValidationFailed(f"Invalid role: {role}") from exc
        with self.rw_uow() as uow:
            user = self._require(uow.users, user_id)
            uow.users.update(user, role=new_role)
            out = UserOut.from_model(user)
        log.info("account.role_changed", extra={"user_id": user_id, "reason": new_role.value})
        return out

    # ------------------------------------------------------------------ #

    @staticmethod
    def _require(users: UserRepository, user_id: int) -> User:
        user = users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user
