# board/infra/jwt/codec.py
from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from board.services._shared.errors import (
    ConfigError,
    InvalidSignature,
    TokenExpired,
    TokenMalformed,
)
from board.services.auth.dto import TokenClaims, TokenKind

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("sub", "jti", "iat", "exp", "type")


def _signature_is_canonical(segment: str) -> bool:
    """
    Return True if ``segment`` is the unique unpadded base64url form of its bytes.

    Lenient decoders ignore the spare low bits of the last character, so two
    different strings can carry the same signature bytes. Rejecting anything
    non-canonical makes every edit of the signature segment observable.
    """
    if not segment:
        return False
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError):
        return False
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii") == segment


def _as_datetime(name: str, value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TokenMalformed(f"Claim '{name}' must be a number.")
    return datetime.fromtimestamp(int(value), tz=UTC)


def _parse_claims(payload: Mapping[str, Any]) -> TokenClaims:
    """Validate the decoded payload once and freeze it into :class:`TokenClaims`."""
    sub = payload.get("sub")
    jti = payload.get("jti")
    if not isinstance(sub, str) or not sub or not isinstance(jti, str) or not jti:
        raise TokenMalformed("Token subject and id must be non-empty strings.")

    try:
        kind = TokenKind(payload.get("type"))
    except ValueError as exc:
        raise TokenMalformed("Unknown token type.") from exc

    username = payload.get("username")
    if username is not None and not isinstance(username, str):
        raise TokenMalformed("Claim 'username' must be a string.")

    roles_raw = payload.get("roles")
    roles: frozenset[str] | None = None
    if roles_raw is not None:
        if not isinstance(roles_raw, list) or not all(isinstance(r, str) for r in roles_raw):
            raise TokenMalformed("Claim 'roles' must be a list of strings.")
        roles = frozenset(roles_raw)

    return TokenClaims(
        subject=sub,
        jti=jti,
        kind=kind,
        issued_at=_as_datetime("iat", payload["iat"]),
        expires_at=_as_datetime("exp", payload["exp"]),
        username=username,
        roles=roles,
    )


class TokenCodec:
    """
    HS256 JWT signer/parser.

    :param secret: Shared HMAC secret. Missing or blank raises :class:`ConfigError`.
    :param leeway: Clock-skew tolerance applied to ``exp`` (and ``iat``).
    """

    def __init__(self, secret: str | None, *, leeway: timedelta = timedelta(seconds=60)) -> None:
        if secret is None or not str(secret).strip():
            raise ConfigError()
        self._secret = str(secret)
        self._leeway = leeway

    def encode(self, payload: Mapping[str, Any]) -> str:
        return jwt.encode(dict(payload), self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify ``token`` and return its typed claims.

        :raises TokenMalformed: Not a three-segment JWT, undecodable, or
            missing/badly typed claims.
        :raises InvalidSignature: Tampered signature, wrong key, or disallowed ``alg``.
        :raises TokenExpired: ``exp`` is more than the leeway in the past
            (exactly ``exp + leeway`` is still accepted).
        """
        if not isinstance(token, str) or token.count(".") != 2:
            raise TokenMalformed()
        if not _signature_is_canonical(token.rsplit(".", 1)[1]):
            raise InvalidSignature()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                leeway=self._leeway,
                options={"require": list(REQUIRED_CLAIMS), "verify_exp": False},
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformed(str(exc) or None) from exc

        claims = _parse_claims(payload)
        # Rejected only once expiry is strictly more than the leeway in the past.
        if claims.expires_at < datetime.now(UTC) - self._leeway:
            raise TokenExpired()
        return claims
