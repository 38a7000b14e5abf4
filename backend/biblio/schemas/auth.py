"""Authentication-related Marshmallow schemas.

Wire names are camelCase (``refreshToken``, ``firstName``); Python attributes
stay snake_case through ``data_key``.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class _Lenient(Schema):
    class Meta:
        unknown = EXCLUDE


class LoginSchema(_Lenient):
    """Input payload for authenticating a user."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RegisterSchema(_Lenient):
    """Input payload for self-registration."""

    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=128))
    first_name = fields.String(
        data_key="firstName", load_default=None, validate=validate.Length(max=100)
    )
    last_name = fields.String(
        data_key="lastName", load_default=None, validate=validate.Length(max=100)
    )


class RefreshSchema(_Lenient):
    refresh_token = fields.String(
        data_key="refreshToken", required=True, validate=validate.Length(min=1)
    )


class ForgotPasswordSchema(_Lenient):
    email = fields.String(load_default="")


class ResetPasswordSchema(_Lenient):
    token = fields.String(load_default="")
    new_password = fields.String(data_key="newPassword", load_default="")


class SessionSchema(Schema):
    """Response payload for login, registration and refresh."""

    token = fields.String(required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    role = fields.String(required=True)
    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)
