"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from board.core.logger import ensure_request_id
from board.services._shared.errors import (
    AuthError,
    AuthErrorKind,
    AuthorizationError,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    ServiceError,
)

log = logging.getLogger(__name__)

# Single source of truth for token/ledger failures.
AUTH_ERROR_STATUS: dict[AuthErrorKind, int] = {
    AuthErrorKind.CONFIG: HTTPStatus.INTERNAL_SERVER_ERROR,
    AuthErrorKind.MALFORMED: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.INVALID_SIGNATURE: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.EXPIRED: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.REFRESH_REUSE_OR_UNKNOWN: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.PRINCIPAL_NOT_FOUND: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.STORE_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
}


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, int(status)


class APIError(Exception):
    """
    Represent a JSON-serializable API error raised by the HTTP layer itself.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"bad_request"``.
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

    def to_problem(self) -> dict[str, Any]:
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class BadRequest(APIError):
    """400 for input the schemas cannot express (e.g. blank message)."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code="bad_request")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


class TokenMissing(Unauthorized):
    """401 when a protected route receives no bearer/refresh token."""

    def __init__(self, message: str = "Authentication token missing") -> None:
        super().__init__(message, code="token_missing")


def service_error_status(err: ServiceError) -> tuple[int, str]:
    """
    Resolve ``(status, code)`` for a service-layer exception.

    :param err: Exception raised below the HTTP layer.
    :returns: HTTP status and stable error code.
    """
    if isinstance(err, AuthError):
        return AUTH_ERROR_STATUS[err.kind], err.kind.value
    if isinstance(err, InvalidCredentials):
        return HTTPStatus.UNAUTHORIZED, "invalid_credentials"
    if isinstance(err, AuthorizationError):
        return HTTPStatus.FORBIDDEN, "forbidden"
    if isinstance(err, NotFoundError):
        return HTTPStatus.NOT_FOUND, "not_found"
    if isinstance(err, ConflictError):
        return HTTPStatus.CONFLICT, "conflict"
    return HTTPStatus.BAD_REQUEST, "bad_request"


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error renders as ``application/problem+json``.
    - 5xx are logged at error level with ``exc_info``; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        problem = err.to_problem()
        level = log.error if err.status_code >= 500 else log.warning
        level("APIError: code=%s status=%s msg=%s", err.code, err.status_code, err.message)
        return _problem_response(problem, err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status, code = service_error_status(err)
        problem = _as_problem(status=status, code=code, message=str(err))
        if status >= 500:
            log.error("ServiceError: code=%s status=%s", code, status, exc_info=err)
        else:
            log.warning("ServiceError: code=%s status=%s msg=%s", code, status, err)
        return _problem_response(problem, status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.BAD_REQUEST,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        fields = sorted(err.messages) if isinstance(err.messages, dict) else []
        log.warning("ValidationError: fields=%s", fields)
        return _problem_response(problem, HTTPStatus.BAD_REQUEST)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        problem = _as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level("HTTPException: code=%s status=%s detail=%s", error_code, status, message)
        return _problem_response(problem, status)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception: %s", type(err).__name__, exc_info=err)
        return _problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)
