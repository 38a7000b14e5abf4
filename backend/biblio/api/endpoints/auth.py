"""Authentication endpoints: sessions, logout and bearer validation."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, request

from biblio.api.deps import (
    ack,
    bearer_token,
    build_account_service,
    build_password_reset_service,
    build_session_service,
    json_response,
    request_data,
    require_bearer,
    service_errors,
    timing,
)
from biblio.core.errors import APIError, BadRequest, error_body
from biblio.core.extensions import limiter
from biblio.schemas import (
    ForgotPasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    SessionSchema,
    UserSchema,
)
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

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
register_schema = RegisterSchema()
refresh_schema = RefreshSchema()
forgot_schema = ForgotPasswordSchema()
reset_schema = ResetPasswordSchema()
session_schema = SessionSchema()
user_schema = UserSchema()

_FAILURE_STATUS = {
    FailureKind.INVALID_CREDENTIALS: HTTPStatus.UNAUTHORIZED,
    FailureKind.ACCOUNT_NOT_ACTIVE: HTTPStatus.FORBIDDEN,
    FailureKind.DUPLICATE_IDENTITY: HTTPStatus.CONFLICT,
    FailureKind.TOKEN_INVALID: HTTPStatus.UNAUTHORIZED,
    FailureKind.REFRESH_TOKEN_NOT_FOUND: HTTPStatus.UNAUTHORIZED,
    FailureKind.REFRESH_TOKEN_EXPIRED: HTTPStatus.UNAUTHORIZED,
}


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


def _failure(failure: AuthFailure, *, status: int | None = None) -> APIError:
    code = status or _FAILURE_STATUS[failure.kind]
    return APIError(failure.message, status_code=code, code=failure.kind.value)


def _session_response(result: SessionOut | AuthFailure, *, failure_status: int | None = None):
    if isinstance(result, AuthFailure):
        raise _failure(result, status=failure_status)
    return json_response(session_schema.dump(result))


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and open a session."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = build_session_service().login(
        LoginIn(username=data["username"], password=data["password"])
    )
    return _session_response(result)


@bp.post("/register")
@timing
def register():
    """Create a member account and sign it in."""

    data = register_schema.load(request.get_json(silent=True) or {})
    result = build_session_service().register(RegisterIn(**data))
    return _session_response(result)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new bearer token."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    result = build_session_service().refresh(RefreshIn(refresh_token=data["refresh_token"]))
    # every refresh failure, inactive owner included, is a plain 401
    return _session_response(result, failure_status=HTTPStatus.UNAUTHORIZED)


@bp.get("/me")
@require_bearer
@service_errors
@timing
def me(principal: Principal):
    """Return the authenticated user's profile."""

    return json_response(user_schema.dump(build_account_service().get_profile(principal)))


def _logout(all_sessions: bool, message: str):
    token = bearer_token()
    if token is None:
        raise APIError("No valid token provided", status_code=HTTPStatus.UNAUTHORIZED)
    svc = build_session_service()
    failure = svc.logout_all(token) if all_sessions else svc.logout(LogoutIn(token=token))
    if failure is not None:
        raise _failure(failure)
    return ack(message)


@bp.post("/logout")
@timing
def logout():
    """Blacklist the presented bearer token and drop the refresh token."""

    return _logout(False, "Logout successful")


@bp.post("/logout-all")
@timing
def logout_all():
    """Invalidate every bearer token of the caller."""

    return _logout(True, "Logout from all devices successful")


@bp.post("/forgot-password")
@timing
def forgot_password():
    """Acknowledge a reset request without revealing whether the email exists."""

    data = forgot_schema.load(request_data())
    build_password_reset_service().request_reset(data["email"].strip())
    return ack("If an account with this email exists, a password reset link has been sent.")


@bp.post("/reset-password")
@timing
def reset_password():
    data = reset_schema.load(request_data())
    if not build_password_reset_service().reset_password(data["token"], data["new_password"]):
        raise BadRequest("Invalid or expired reset token")
    return ack("Password has been reset successfully")


@bp.get("/validate")
@timing
def validate():
    """Report whether the presented bearer token is currently accepted."""

    token = bearer_token()
    if token is not None:
        result = build_session_service().authenticate(token)
        if not isinstance(result, AuthFailure):
            return ack("Token is valid")
    return json_response(error_body("Token is invalid or expired"), status=HTTPStatus.UNAUTHORIZED)
