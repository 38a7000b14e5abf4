"""Authentication and session services."""

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
from biblio.services.auth.service import SessionService

__all__ = [
    "AuthFailure",
    "FailureKind",
    "LoginIn",
    "LogoutIn",
    "Principal",
    "RefreshIn",
    "RegisterIn",
    "SessionOut",
    "SessionService",
]
