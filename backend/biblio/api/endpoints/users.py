"""Administrative user management (role ``ADMIN`` only)."""

from __future__ import annotations

from flask import Blueprint

from biblio.api.deps import (
    ack,
    build_account_service,
    json_response,
    parse_pagination,
    request_data,
    require_role,
    service_errors,
    timing,
)
from biblio.schemas import RoleUpdateSchema, UserSchema, build_meta
from biblio.services.auth.dto import Principal

bp = Blueprint("users", __name__)

ADMIN = "ADMIN"

user_schema = UserSchema()
users_schema = UserSchema(many=True)
role_update_schema = RoleUpdateSchema()


@bp.get("")
@require_role(ADMIN)
@service_errors
@timing
def list_users(principal: Principal):
    """Return one page of accounts ordered by id."""

    page, limit = parse_pagination()
    result = build_account_service().list_users(page=page, limit=limit)
    return json_response(
        {
            "data": users_schema.dump(result.items),
            "meta": build_meta(total=result.total, page=result.page, limit=result.limit),
        }
    )


@bp.delete("/<int:user_id>")
@require_role(ADMIN)
@service_errors
@timing
def delete_user(user_id: int, principal: Principal):
    build_account_service().delete_user(user_id)
    return ack("User deleted successfully")


@bp.put("/<int:user_id>/block")
@require_role(ADMIN)
@service_errors
@timing
def block_user(user_id: int, principal: Principal):
    """Block an account and end its refresh session."""

    return json_response(user_schema.dump(build_account_service().block_user(user_id)))


@bp.put("/<int:user_id>/unblock")
@require_role(ADMIN)
@service_errors
@timing
def unblock_user(user_id: int, principal: Principal):
    return json_response(user_schema.dump(build_account_service().unblock_user(user_id)))


@bp.put("/<int:user_id>/role")
@require_role(ADMIN)
@service_errors
@timing
def update_role(user_id: int, principal: Principal):
    """Change an account's role; ``role`` comes from the JSON body or query string."""

    data = role_update_schema.load(request_data())
    out = build_account_service().set_role(user_id, data["role"])
    return json_response(user_schema.dump(out))
