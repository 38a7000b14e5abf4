"""Shared API helpers: service wiring, bearer authentication, responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from biblio.core.errors import Forbidden, Unauthorized, success_body
from biblio.core.extensions import get_redis
from biblio.infra.db.sqlalchemy_blacklist_store import SQLAlchemyTokenBlacklistStore
from biblio.infra.db.sqlalchemy_refresh_token_store import SQLAlchemyRefreshTokenStore
from biblio.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from biblio.infra.redis.redis_blacklist_store import RedisTokenBlacklistStore
from biblio.schemas.common import PaginationQuerySchema
from biblio.services import AccountService, PasswordResetService, SessionService, TokenBlacklist
from biblio.services._shared.base import BaseService
from biblio.services._shared.errors import ServiceError
from biblio.services._shared.ports import TokenBlacklistStore
from biblio.services.auth.dto import AuthFailure, Principal

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "

# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


def build_blacklist_store() -> TokenBlacklistStore:
    """Redis when ``REDIS_URL`` is configured, otherwise the database."""
    r = get_redis()
    if r is not None:
        return RedisTokenBlacklistStore(r)
    return SQLAlchemyTokenBlacklistStore()


def build_blacklist() -> TokenBlacklist:
    return TokenBlacklist(tokens=JWTTokenProvider(), store=build_blacklist_store())


def build_session_service() -> SessionService:
    """Assemble a :class:`SessionService` from the active app configuration."""
    return SessionService(
        token_provider=JWTTokenProvider(),
        refresh_store=SQLAlchemyRefreshTokenStore(),
        blacklist=build_blacklist(),
        rotate_refresh_tokens=bool(current_app.config.get("AUTH_ROTATE_REFRESH_TOKENS")),
    )


def build_account_service() -> AccountService:
    return AccountService(refresh_store=SQLAlchemyRefreshTokenStore())


def build_password_reset_service() -> PasswordResetService:
    return PasswordResetService()


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------


def bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any.

    Parsed here rather than through ``verify_jwt_in_request`` so that every
    failure goes through :class:`SessionService` and the uniform error body.
    """
    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def request_data() -> dict[str, Any]:
    """Merge query string, form fields and JSON body (JSON wins)."""
    data: dict[str, Any] = dict(request.args.items())
    data.update(request.form.items())
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update(body)
    return data


def parse_pagination(default_limit: int = 10, max_limit: int = 100) -> tuple[int, int]:
    """Parse ``page``/``limit`` from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return data["page"], data["limit"]


# ---------------------------------------------------------------------------
# Authentication / authorization decorators
# ---------------------------------------------------------------------------


def _resolve_principal() -> Principal:
    token = bearer_token()
    if token is None:
        raise Unauthorized("No valid token provided")
    result = build_session_service().authenticate(token)
    if isinstance(result, AuthFailure):
        raise Unauthorized(result.message)
    return result


def require_bearer(func: F) -> F:
    """Authenticate the bearer token and pass the caller as ``principal``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        kwargs["principal"] = _resolve_principal()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(*roles: str) -> Callable[[F], F]:
    """Like :func:`require_bearer`, and additionally demand one of ``roles``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            principal = _resolve_principal()
            if not principal.has_role(*roles):
                current_app.logger.warning(
                    "auth.forbidden",
                    extra={"username": principal.username, "path": request.path},
                )
                raise Forbidden("Access denied")
            kwargs["principal"] = principal
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def ack(message: str, *, status: int = 200) -> Response:
    """Return the uniform ``{"message", "success": "true"}`` acknowledgement."""
    return json_response(success_body(message), status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def service_errors(func: F) -> F:
    """Translate service-layer errors raised by the handler into API errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            raise BaseService().translate_exceptions(exc) from exc

    return wrapper  # type: ignore[return-value]
