"""Database-backed bearer token blacklist."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from biblio.core.extensions import db
from biblio.models.token import BlacklistedToken
from biblio.services._shared.ports import TokenBlacklistStore


class SQLAlchemyTokenBlacklistStore(TokenBlacklistStore):
    """
    Blacklist kept in the ``token_blacklist`` table, visible to every process
    sharing the database.
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def contains(self, jti: str) -> bool:
        stmt = select(BlacklistedToken.id).where(BlacklistedToken.jti == jti)
        return self.session.execute(stmt).first() is not None

    def add(self, *, jti: str, expires_at: datetime) -> None:
        if self.contains(jti):
            return
        try:
            with self.session.begin_nested():
                self.session.add(BlacklistedToken(jti=jti, expires_at=expires_at))
                self.session.flush()
        except IntegrityError:
            # another process blacklisted the same token first
            pass

    def prune(self, now: datetime) -> int:
        result = self.session.execute(
            delete(BlacklistedToken).where(BlacklistedToken.expires_at <= now)
        )
        self.session.flush()
        return int(result.rowcount or 0)
