# biblio/services/auth/service.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from biblio.models.user import Role, Status, User
from biblio.services._shared.base import BaseService
from biblio.services._shared.errors import violates
from biblio.services._shared.ports import RefreshTokenStore, RefreshTokenView, TokenProvider
from biblio.services.auth.dto import (
    AuthFailure,
    FailureKind,
    LoginIn,
    LogoutIn,
    Principal,
    RefreshIn,
    RegisterIn,
    SessionOut,
)
from biblio.services.blacklist import TokenBlacklist

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
INVALID_TOKEN = "Token is invalid or expired"
NO_VALID_TOKEN = "No valid token provided"

STATUS_MESSAGES: dict[Status, str] = {
    Status.BLOCKED: "Account is blocked. Please contact administrator.",
    Status.INACTIVE: "Account is inactive. Please contact administrator.",
    Status.PENDING: "Account is pending approval. Please wait for administrator approval.",
}


class SessionService(BaseService):
    """
    Session lifecycle service (login / register / refresh / logout).

    Bearer tokens are signed by a pluggable :class:`TokenProvider`, refresh
    tokens are persisted through a :class:`RefreshTokenStore` (one per user)
    and early invalidation goes through the :class:`TokenBlacklist`.

    Expected outcomes (bad credentials, inactive account, duplicates, stale
    tokens) come back as :class:`AuthFailure` values. Store failures are not
    caught here and propagate to the API error handlers.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        blacklist: TokenBlacklist,
        rotate_refresh_tokens: bool = False,
    ) -> None:
        """
        :param token_provider: Adapter for signing and checking bearer tokens.
        :param refresh_store: Stateful store of refresh tokens.
        :param blacklist: Shared blacklist of bearer tokens.
        :param rotate_refresh_tokens: Issue a new refresh token on every refresh.
        """
        super().__init__()
        self.tokens = token_provider
        self.refresh_store = refresh_store
        self.blacklist = blacklist
        self.rotate_refresh_tokens = rotate_refresh_tokens

    # ------------------------------------------------------------------ #
    # Login / register
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> SessionOut | AuthFailure:
        """
        Verify credentials and open a session.

        The password is checked before the account status, so an attacker
        without the password learns nothing about the account.

        :param dto: Login input.
        :returns: Tokens and identity, or a failure
            (``INVALID_CREDENTIALS``, ``ACCOUNT_NOT_ACTIVE``).
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_username(dto.username)
            if user is None or not user.verify_password(dto.password):
                log.warning(
                    "auth.login.rejected",
                    extra={"username": dto.username, "reason": "invalid_credentials"},
                )
                return AuthFailure(FailureKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

            if not user.is_active:
                log.warning(
                    "auth.login.rejected",
                    extra={"username": user.username, "reason": user.status.value.lower()},
                )
                return AuthFailure(
                    FailureKind.ACCOUNT_NOT_ACTIVE,
                    STATUS_MESSAGES.get(user.status, "Account is not active"),
                )

            refresh = self.refresh_store.issue(user.id)
            out = self._open_session(user, refresh)

        log.info("auth.login.success", extra={"username": out.username})
        return out

    def register(self, dto: RegisterIn) -> SessionOut | AuthFailure:
        """
        Create an ACTIVE ``MEMBER`` account, then log it in.

        :returns: Tokens and identity, or ``DUPLICATE_IDENTITY`` with the
            offending ``field`` (nothing is written in that case).
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_username(dto.username):
                    return self._duplicate("username")
                if uow.users.exists_by_email(dto.email):
                    return self._duplicate("email")

                user = User(
                    username=dto.username,
                    email=dto.email,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    role=Role.MEMBER,
                    status=Status.ACTIVE,
                )
                user.password = dto.password
                uow.users.add(user)
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            if violates(exc, "uq_users_email"):
                return self._duplicate("email")
            if violates(exc, "uq_users_username"):
                return self._duplicate("username")
            raise

        log.info("auth.register.success", extra={"username": dto.username})
        return self.login(LoginIn(username=dto.username, password=dto.password))

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> SessionOut | AuthFailure:
        """
        Exchange a live refresh token for a new bearer token.

        The same refresh token is returned unless rotation is enabled. An
        expired token is deleted before the failure is reported; so is the
        token of an owner who is no longer ACTIVE.
        """
        with self.rw_uow() as uow:
            view = self.refresh_store.find(dto.refresh_token)
            if view is None:
                log.warning("auth.refresh.rejected", extra={"reason": "not_found"})
                return AuthFailure(FailureKind.REFRESH_TOKEN_NOT_FOUND, INVALID_REFRESH_TOKEN)

            live = self.refresh_store.verify_not_expired(view)
            if live is None:
                log.warning(
                    "auth.refresh.rejected",
                    extra={"user_id": view.user_id, "reason": "expired"},
                )
                return AuthFailure(FailureKind.REFRESH_TOKEN_EXPIRED, INVALID_REFRESH_TOKEN)

            user = uow.users.get(live.user_id)
            if user is None or not user.is_active:
                self.refresh_store.delete_for_user(live.user_id)
                log.warning(
                    "auth.refresh.rejected",
                    extra={"user_id": live.user_id, "reason": "account_not_active"},
                )
                return AuthFailure(FailureKind.ACCOUNT_NOT_ACTIVE, "Account is no longer active")

            if self.rotate_refresh_tokens:
                live = self.refresh_store.issue(user.id)
            out = self._open_session(user, live)

        log.info("auth.refresh.success", extra={"username": out.username})
        return out

    # ------------------------------------------------------------------ #
    # Bearer checks
    # ------------------------------------------------------------------ #

    def authenticate(self, token: str) -> Principal | AuthFailure:
        """
        Resolve a bearer token into a :class:`Principal`.

        Valid iff signature and expiry hold, the token is not blacklisted, its
        owner exists and is ACTIVE, and its ``uid``/``tv`` claims match the
        owner's id and current ``token_version``.
        """
        claims = self.tokens.claims_of(token)
        if not claims:
            return AuthFailure(FailureKind.TOKEN_INVALID, INVALID_TOKEN)

        with self.ro_uow() as uow:
            if self.blacklist.is_jti_blacklisted(str(claims.get("jti", ""))):
                return AuthFailure(FailureKind.TOKEN_INVALID, INVALID_TOKEN)

            user = uow.users.get_by_username(str(claims["sub"]))
            if user is None or not user.is_active or not self._issued_for(claims, user):
                return AuthFailure(FailureKind.TOKEN_INVALID, INVALID_TOKEN)

            return Principal(
                user_id=user.id,
                username=user.username,
                role=user.role.value,
                token=token,
            )

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> AuthFailure | None:
        """
        Blacklist the bearer token and drop the user's refresh token.

        The token may be expired, but it must still be current: a blacklisted
        token, or one issued before the owner's last logout-all or to a deleted
        account of the same name, is refused before anything is touched. With
        ``all_sessions`` the user's ``token_version`` is bumped, which
        invalidates every bearer token issued before now.

        :returns: ``None`` on success, ``TOKEN_INVALID`` otherwise.
        """
        claims = self.tokens.claims_of(dto.token, allow_expired=True)
        if not claims:
            return AuthFailure(FailureKind.TOKEN_INVALID, NO_VALID_TOKEN)
        subject = str(claims["sub"])

        with self.rw_uow() as uow:
            user = uow.users.get_by_username(subject)
            if (
                user is None
                or not self._issued_for(claims, user)
                or self.blacklist.is_jti_blacklisted(str(claims.get("jti", "")))
            ):
                log.warning("auth.logout.rejected", extra={"username": subject})
                return AuthFailure(FailureKind.TOKEN_INVALID, NO_VALID_TOKEN)

            self.blacklist.blacklist(dto.token)
            self.refresh_store.delete_for_user(user.id)
            if dto.all_sessions:
                uow.users.bump_token_version(user.id)

        log.info(
            "auth.logout.all" if dto.all_sessions else "auth.logout",
            extra={"username": subject},
        )
        return None

    def logout_all(self, token: str) -> AuthFailure | None:
        """Log out and invalidate every bearer token the user holds."""
        return self.logout(LogoutIn(token=token, all_sessions=True))

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _open_session(self, user: User, refresh: RefreshTokenView) -> SessionOut:
        claims: dict[str, Any] = {
            "uid": user.id,
            "role": user.role.value,
            "tv": user.token_version,
        }
        bearer = self.tokens.issue(user.username, claims=claims)
        return SessionOut(
            token=bearer.token,
            refresh_token=refresh.token,
            username=user.username,
            email=user.email,
            role=user.role.value,
            first_name=user.first_name,
            last_name=user.last_name,
        )

    @staticmethod
    def _issued_for(claims: dict[str, Any], user: User) -> bool:
        """True when the token names this very account at its current epoch."""
        return claims.get("uid") == user.id and claims.get("tv") == user.token_version

    @staticmethod
    def _duplicate(field: str) -> AuthFailure:
        log.warning("auth.register.rejected", extra={"reason": f"duplicate_{field}"})
        return AuthFailure(
            FailureKind.DUPLICATE_IDENTITY,
            f"{field.capitalize()} already exists",
            field=field,
        )
