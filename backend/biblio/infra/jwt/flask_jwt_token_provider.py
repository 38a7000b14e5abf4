# biblio/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from biblio.services._shared.ports import BearerToken, TokenProvider

log = logging.getLogger(__name__)


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing key and lifetime come from ``JWT_SECRET_KEY`` and
    ``JWT_ACCESS_TOKEN_EXPIRES``. Every check failure (malformed, bad
    signature, expired) collapses to ``None`` so callers cannot tell them apart.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def issue(self, subject: str, *, claims: dict[str, Any] | None = None) -> BearerToken:
        token = cast(str, create_access_token(identity=subject, additional_claims=claims or {}))
        payload = cast(dict[str, Any], decode_token(token))
        return BearerToken(
            token=token,
            subject=subject,
            jti=str(payload["jti"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )

    def claims_of(self, token: str, *, allow_expired: bool = False) -> dict[str, Any] | None:
        if not token:
            return None
        try:
            return cast(dict[str, Any], decode_token(token, allow_expired=allow_expired))
        except (PyJWTError, JWTExtendedException) as exc:
            log.debug("Rejected bearer token: %s", type(exc).__name__)
            return None

    def validate(self, token: str) -> str | None:
        claims = self.claims_of(token)
        return str(claims["sub"]) if claims and claims.get("sub") else None

    def subject_of(self, token: str) -> str | None:
        claims = self.claims_of(token, allow_expired=True)
        return str(claims["sub"]) if claims and claims.get("sub") else None
