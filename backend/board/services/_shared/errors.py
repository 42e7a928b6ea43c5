"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are stable contracts between repositories, the token
subsystem, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``board/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The error handlers in ``board.core.errors`` map them to responses.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str
    """

    entity: str
    key: str

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a uniqueness rule is violated.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return self.detail


class AuthorizationError(ServiceError):
    """Raised when an authenticated principal lacks a required role."""

    def __init__(self, message: str = "Insufficient privileges") -> None:
        super().__init__(message)


class InvalidCredentials(ServiceError):
    """Raised when a username/password pair does not match a principal."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Token subsystem taxonomy
# --------------------------------------------------------------------------- #


class AuthErrorKind(Enum):
    """Tag carried by every :class:`AuthError`; the HTTP layer maps on it."""

    CONFIG = "config_error"
    MALFORMED = "token_malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "token_expired"
    REFRESH_REUSE_OR_UNKNOWN = "refresh_reuse_or_unknown"
    PRINCIPAL_NOT_FOUND = "principal_not_found"
    STORE_UNAVAILABLE = "store_unavailable"


class AuthError(ServiceError):
    """
    Base class for token lifecycle and store failures.

    Subclasses pin :attr:`kind`; callers branch on the kind rather than on
    the message text.
    """

    kind: AuthErrorKind
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ConfigError(AuthError):
    """Signing secret missing or blank; fatal at startup."""

    kind = AuthErrorKind.CONFIG
    default_message = "JWT_HS256_SECRET is required"


class TokenMalformed(AuthError):
    """Token cannot be decoded or lacks the expected claims."""

    kind = AuthErrorKind.MALFORMED
    default_message = "Malformed token"


class InvalidSignature(AuthError):
    """Token signature does not verify against the configured secret."""

    kind = AuthErrorKind.INVALID_SIGNATURE
    default_message = "Invalid token signature"


class TokenExpired(AuthError):
    """Token expiry lies beyond the clock-skew tolerance."""

    kind = AuthErrorKind.EXPIRED
    default_message = "Token expired"


class RefreshReuseOrUnknown(AuthError):
    """
    Refresh jti is not active or belongs to another principal.

    Covers both "already rotated/revoked" and "never issued" on purpose.
    """

    kind = AuthErrorKind.REFRESH_REUSE_OR_UNKNOWN
    default_message = "Invalid refresh token"


class PrincipalNotFound(AuthError):
    """Token subject no longer exists in the user store."""

    kind = AuthErrorKind.PRINCIPAL_NOT_FOUND
    default_message = "User not found"


class StoreUnavailable(AuthError):
    """Key-value store unreachable or connection pool exhausted."""

    kind = AuthErrorKind.STORE_UNAVAILABLE
    default_message = "Store temporarily unavailable"
