"""Centralized JSON error handling for the API.

Every handled error is rendered with the uniform body
``{"error": <message>, "success": "false"}``; validation failures add a
``details`` member. Acknowledgements use :func:`success_body`.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from biblio.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def error_body(message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Build the uniform error payload.

    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Error dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {"error": message, "success": "false"}
    if details:
        body["details"] = details
    return body


def success_body(message: str) -> dict[str, str]:
    """Build the uniform acknowledgement payload."""
    return {"message": message, "success": "true"}


def _error_response(body: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(body), int(status)


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier used in logs. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_body(self) -> dict[str, Any]:
        """
        Serialize error metadata into the uniform error body.

        :returns: Error dictionary.
        :rtype: dict
        """
        return error_body(self.message, self.details or None)


# Domain conveniences
class BadRequest(APIError):
    """400 for malformed or semantically invalid input."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="bad_request")


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness/constraint collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


class ServiceUnavailable(APIError):
    """503 when a backing store cannot be reached."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            message, status_code=HTTPStatus.SERVICE_UNAVAILABLE, code="service_unavailable"
        )


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees the uniform error body for all handled errors.
    - Store failures (database, Redis) surface as 503 and are never retried.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _error_response(err.to_body(), err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: status=%s detail=%s request_id=%s",
            status,
            message,
            ensure_request_id(),
        )
        return _error_response(error_body(message), status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        body = error_body("Validation failed", {"errors": err.messages})
        return _error_response(body, HTTPStatus.BAD_REQUEST)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(error_body("Resource conflict"), HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(
            error_body("Service temporarily unavailable"), HTTPStatus.SERVICE_UNAVAILABLE
        )

    @app.errorhandler(RedisError)
    def handle_redis_error(err: RedisError):
        log.error("RedisError: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(
            error_body("Service temporarily unavailable"), HTTPStatus.SERVICE_UNAVAILABLE
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        return _error_response(error_body("Unexpected error"), HTTPStatus.INTERNAL_SERVER_ERROR)
