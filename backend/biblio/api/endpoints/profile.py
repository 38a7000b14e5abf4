"""Self-service profile endpoints for the authenticated user."""

from __future__ import annotations

from flask import Blueprint

from biblio.api.deps import (
    ack,
    build_account_service,
    json_response,
    request_data,
    require_bearer,
    service_errors,
    timing,
)
from biblio.schemas import PasswordChangeSchema, ProfileUpdateSchema, UserSchema
from biblio.services.accounts.dto import PasswordChangeIn, ProfileUpdateIn
from biblio.services.auth.dto import Principal

bp = Blueprint("profile", __name__)

user_schema = UserSchema()
profile_update_schema = ProfileUpdateSchema()
password_change_schema = PasswordChangeSchema()


@bp.get("/profile")
@require_bearer
@service_errors
@timing
def get_profile(principal: Principal):
    return json_response(user_schema.dump(build_account_service().get_profile(principal)))


@bp.put("/profile")
@require_bearer
@service_errors
@timing
def update_profile(principal: Principal):
    """Update first/last name and email of the caller."""

    data = profile_update_schema.load(request_data())
    out = build_account_service().update_profile(principal, ProfileUpdateIn(**data))
    return json_response(user_schema.dump(out))


@bp.post("/change-password")
@require_bearer
@service_errors
@timing
def change_password(principal: Principal):
    """Change the caller's password; accepts JSON, form fields or query parameters."""

    data = password_change_schema.load(request_data())
    build_account_service().change_password(principal, PasswordChangeIn(**data))
    return ack("Password changed successfully")
