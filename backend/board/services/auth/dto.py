# board/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

# ---------------------------- Token model --------------------------------- #


class TokenKind(str, Enum):
    """Value of the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified claims of an access or refresh token.

    Built once by the codec at parse time; call sites never reach into a raw
    claims dictionary.

    :param subject: Principal id (``sub``).
    :type subject: str
    :param jti: Unique token id.
    :type jti: str
    :param kind: Access or refresh.
    :type kind: TokenKind
    :param issued_at: ``iat`` as an aware UTC datetime.
    :type issued_at: datetime
    :param expires_at: ``exp`` as an aware UTC datetime.
    :type expires_at: datetime
    :param username: Embedded username (access tokens only).
    :type username: str | None
    :param roles: Embedded role names (access tokens only).
    :type roles: frozenset[str] | None
    """

    subject: str
    jti: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    username: str | None = None
    roles: frozenset[str] | None = None


# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for account creation.

    :param username: Requested handle.
    :param email: Login email.
    :param password: Raw password (hashed before storage).
    """

    username: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SigninIn:
    """
    Input DTO for sign-in.

    :param username: Account handle.
    :param password: Raw password (to be verified).
    """

    username: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param refresh_jti: Ledger key of ``refresh_token``.
    :type refresh_jti: str
    """

    access_token: str
    refresh_token: str
    refresh_jti: str


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime (also the ledger TTL).
    :type refresh_expires: timedelta
    :param clock_skew: Tolerance applied to ``exp`` on verification.
    :type clock_skew: timedelta
    """

    access_expires: timedelta = timedelta(seconds=600)
    refresh_expires: timedelta = timedelta(seconds=604800)
    clock_skew: timedelta = timedelta(seconds=60)

    @property
    def refresh_ttl_seconds(self) -> int:
        return int(self.refresh_expires.total_seconds())

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_expires.total_seconds())
