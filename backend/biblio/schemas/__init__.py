"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    ForgotPasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    SessionSchema,
)
from .common import MetaSchema, PaginationQuerySchema, build_meta
from .user import PasswordChangeSchema, ProfileUpdateSchema, RoleUpdateSchema, UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "RefreshSchema",
    "ForgotPasswordSchema",
    "ResetPasswordSchema",
    "SessionSchema",
    "PaginationQuerySchema",
    "MetaSchema",
    "build_meta",
    "UserSchema",
    "ProfileUpdateSchema",
    "PasswordChangeSchema",
    "RoleUpdateSchema",
]
