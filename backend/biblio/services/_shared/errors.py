"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
concepts. Expected authentication outcomes are *not* exceptions: they are
returned as :class:`biblio.services.auth.dto.AuthFailure` values. The
translation to HTTP responses happens in ``biblio.core.errors`` via
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message; SQLite reports
    ``table.column`` instead, so both forms are matched.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name, e.g. ``uq_users_email``.
    :returns: ``True`` if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>" (SQLite wording)
    parts = constraint_name.lower().removeprefix("uq_")
    table, _, column = parts.rpartition("_")
    return bool(table) and f"{table}.{column}" in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    These are *not* HTTP errors; BaseService translates them to APIError.
    """


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation, shown to clients.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class ValidationFailed(ServiceError):
    """Raised when input is well-formed but violates a business rule."""


class AuthorizationError(ServiceError):
    """Raised when the actor lacks the role required for an operation."""
