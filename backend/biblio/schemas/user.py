"""User-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema


class UserSchema(Schema):
    """Public representation of an account."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)
    role = fields.String(required=True)
    status = fields.String(required=True)


class ProfileUpdateSchema(Schema):
    """Partial profile update; absent keys stay unchanged."""

    class Meta:
        unknown = EXCLUDE

    first_name = fields.String(data_key="firstName", validate=validate.Length(max=100))
    last_name = fields.String(data_key="lastName", validate=validate.Length(max=100))
    email = fields.Email(validate=validate.Length(max=254))


class PasswordChangeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = fields.String(data_key="currentPassword", required=True)
    new_password = fields.String(
        data_key="newPassword", required=True, validate=validate.Length(min=6, max=128)
    )
    confirm_password = fields.String(data_key="confirmPassword", load_default=None)

    @validates_schema
    def _passwords_match(self, data, **kwargs):
        confirm = data.get("confirm_password")
        if confirm is not None and data.get("new_password") != confirm:
            raise ValidationError(
                "New password and confirmation do not match", field_name="confirmPassword"
            )


class RoleUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    role = fields.String(required=True, validate=validate.Length(min=1, max=30))
