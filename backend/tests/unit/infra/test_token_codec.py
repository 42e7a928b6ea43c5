"""Unit tests for the HS256 token codec: signature, expiry and claim validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from board.infra.jwt.codec import TokenCodec
from board.services._shared.errors import (
    AuthErrorKind,
    ConfigError,
    InvalidSignature,
    TokenExpired,
    TokenMalformed,
)
from board.services.auth.dto import TokenKind

from tests.helpers.auth import TEST_SECRET

B64URL = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"


def _payload(**overrides):
    now = datetime.now(UTC)
    payload = {
        "sub": "user-1",
        "jti": "jti-1",
        "iat": now,
        "exp": now + timedelta(minutes=10),
        "type": "access",
        "username": "alice",
        "roles": ["user"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


def test_decode_returns_typed_claims(codec):
    claims = codec.decode(codec.encode(_payload()))

    assert claims.subject == "user-1"
    assert claims.jti == "jti-1"
    assert claims.kind is TokenKind.ACCESS
    assert claims.username == "alice"
    assert claims.roles == frozenset({"user"})
    assert claims.expires_at > claims.issued_at


@pytest.mark.parametrize("secret", [None, "", "   "])
def test_missing_secret_is_config_error(secret):
    with pytest.raises(ConfigError) as exc:
        TokenCodec(secret)
    assert exc.value.kind is AuthErrorKind.CONFIG


def test_every_signature_character_flip_is_rejected(codec):
    token = codec.encode(_payload())
    head, sig = token.rsplit(".", 1)

    for i, ch in enumerate(sig):
        replacement = B64URL[(B64URL.index(ch) + 1) % len(B64URL)]
        tampered = f"{head}.{sig[:i]}{replacement}{sig[i + 1:]}"
        with pytest.raises(InvalidSignature):
            codec.decode(tampered)


def test_wrong_key_is_invalid_signature(codec):
    other = TokenCodec("another-secret-of-similar-length-xyz")
    with pytest.raises(InvalidSignature):
        codec.decode(other.encode(_payload()))


def test_expiry_respects_sixty_second_skew(codec, freeze_time):
    with freeze_time("2024-01-01 12:00:00") as frozen:
        now = datetime.now(UTC)
        token = codec.encode(_payload(iat=now, exp=now + timedelta(seconds=10)))

        frozen.tick(timedelta(seconds=10 + 59))
        assert codec.decode(token).subject == "user-1"

        frozen.tick(timedelta(seconds=1))
        assert codec.decode(token).subject == "user-1"

        frozen.tick(timedelta(seconds=1))
        with pytest.raises(TokenExpired):
            codec.decode(token)


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d"])
def test_wrong_segment_count_is_malformed(codec, token):
    with pytest.raises(TokenMalformed):
        codec.decode(token)


def test_undecodable_payload_is_malformed(codec):
    head, _, sig = codec.encode(_payload()).split(".")
    with pytest.raises(TokenMalformed):
        codec.decode(f"{head}.%%%notbase64%%%.{sig}")


@pytest.mark.parametrize("missing", ["sub", "jti", "iat", "exp", "type"])
def test_missing_required_claim_is_malformed(codec, missing):
    payload = _payload()
    del payload[missing]
    with pytest.raises(TokenMalformed):
        codec.decode(codec.encode(payload))


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "session"},
        {"sub": ""},
        {"jti": 42},
        {"roles": "admin"},
        {"roles": ["user", 7]},
        {"username": ["alice"]},
        {"exp": "tomorrow"},
    ],
)
def test_badly_typed_claims_are_malformed(codec, overrides):
    with pytest.raises(TokenMalformed):
        codec.decode(codec.encode(_payload(**overrides)))
