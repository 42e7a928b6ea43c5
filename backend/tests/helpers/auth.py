"""Authentication helpers for tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from board.infra.jwt.codec import TokenCodec

TEST_SECRET = "unit-test-secret-0123456789abcdef"


def forge_token(secret: str = TEST_SECRET, *, expires_in: int = 600, **claims) -> str:
    """Sign an arbitrary payload, bypassing the token service.

    Parameters
    ----------
    secret:
        HMAC secret to sign with.
    expires_in:
        Seconds until ``exp``; negative values give an already expired token.
    **claims:
        Claims merged over a valid access-token payload.
    """

    now = datetime.now(UTC)
    payload = {
        "sub": "user-1",
        "jti": "jti-1",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "type": "access",
        "username": "alice",
        "roles": ["user"],
    }
    payload.update(claims)
    return TokenCodec(secret).encode(payload)
