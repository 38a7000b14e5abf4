"""Persistence models for refresh tokens and blacklisted bearer tokens."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from biblio.core.extensions import db

from .base import PKMixin, ReprMixin, UTCDateTime


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    Opaque refresh token owned by exactly one user.

    ``user_id`` is UNIQUE: a user holds at most one live refresh token, and
    issuing a new one replaces the previous row.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(128), nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        UniqueConstraint("user_id", name="uq_refresh_tokens_user_id"),
    )


class BlacklistedToken(PKMixin, ReprMixin, db.Model):
    """Bearer token (by ``jti``) invalidated before its natural expiry."""

    __tablename__ = "token_blacklist"

    jti: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("jti", name="uq_token_blacklist_jti"),
        Index("ix_token_blacklist_expires_at", "expires_at"),
    )
