"""Database-backed refresh token store (one row per user)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import cast

from flask import current_app
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from biblio.core.extensions import db
from biblio.models.token import RefreshToken
from biblio.services._shared.ports import (
    RefreshTokenStore,
    RefreshTokenView,
    new_refresh_token,
)

log = logging.getLogger(__name__)


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store on the ``refresh_tokens`` table.

    Writes run on the caller's session and are committed by the caller's unit
    of work. Replacement is delete-then-insert inside a SAVEPOINT; the UNIQUE
    constraint on ``user_id`` guarantees at most one live row per user even
    when two logins race.

    :param session: Optional explicit session (defaults to the Flask-scoped one).
    :param ttl: Optional lifetime override (defaults to ``REFRESH_TOKEN_EXPIRES``).
    """

    def __init__(self, session: Session | None = None, ttl: timedelta | None = None) -> None:
        self._session = session
        self._ttl = ttl

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    @property
    def ttl(self) -> timedelta:
        if self._ttl is not None:
            return self._ttl
        return cast(timedelta, current_app.config["REFRESH_TOKEN_EXPIRES"])

    @staticmethod
    def _view(row: RefreshToken) -> RefreshTokenView:
        return RefreshTokenView(token=row.token, user_id=row.user_id, expires_at=row.expires_at)

    def _replace(self, user_id: int) -> RefreshToken:
        with self.session.begin_nested():
            self.session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
            row = RefreshToken(
                token=new_refresh_token(),
                user_id=user_id,
                expires_at=datetime.now(UTC) + self.ttl,
                created_at=datetime.now(UTC),
            )
            self.session.add(row)
            self.session.flush()
        return row

    def issue(self, user_id: int) -> RefreshTokenView:
        try:
            row = self._replace(user_id)
        except IntegrityError:
            # A concurrent issuance inserted between our delete and insert.
            log.warning("Refresh token insert raced; retrying once", extra={"user_id": user_id})
            row = self._replace(user_id)
        return self._view(row)

    def find(self, token: str) -> RefreshTokenView | None:
        if not token:
            return None
        row = self.session.execute(
            select(RefreshToken).where(RefreshToken.token == token)
        ).scalar_one_or_none()
        return self._view(row) if row is not None else None

    def verify_not_expired(self, view: RefreshTokenView) -> RefreshTokenView | None:
        if not view.is_expired():
            return view
        self.session.execute(delete(RefreshToken).where(RefreshToken.token == view.token))
        self.session.flush()
        return None

    def delete_for_user(self, user_id: int) -> int:
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        self.session.flush()
        return int(result.rowcount or 0)
