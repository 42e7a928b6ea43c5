# board/infra/jwt/token_service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from board.infra.jwt.codec import TokenCodec
from board.models.principal import Principal
from board.services._shared.errors import AuthError, TokenMalformed
from board.services._shared.ports import TokenProvider
from board.services.auth.dto import AuthTokenConfig, TokenClaims, TokenKind

log = logging.getLogger(__name__)


@dataclass(slots=True)
class JWTTokenService(TokenProvider):
    """
    Issue and verify access/refresh JWTs.

    Verification is pure computation: no store lookups, no I/O. Refresh
    tokens additionally go through the ledger, which is not this class's
    concern.

    :param codec: Signer/parser bound to the shared secret.
    :param cfg: Lifetimes and clock-skew tolerance.
    """

    codec: TokenCodec
    cfg: AuthTokenConfig = field(default_factory=AuthTokenConfig)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JWTTokenService:
        """
        Build the service from Flask-style config keys.

        :raises ConfigError: When ``JWT_HS256_SECRET`` is missing or blank.
        """
        cfg = AuthTokenConfig(
            access_expires=timedelta(seconds=int(config.get("JWT_ACCESS_TTL_SEC", 600))),
            refresh_expires=timedelta(seconds=int(config.get("JWT_REFRESH_TTL_SEC", 604800))),
            clock_skew=timedelta(seconds=int(config.get("JWT_CLOCK_SKEW_SEC", 60))),
        )
        codec = TokenCodec(config.get("JWT_HS256_SECRET"), leeway=cfg.clock_skew)
        log.info(
            "token_service.init access_ttl=%s refresh_ttl=%s",
            cfg.access_ttl_seconds,
            cfg.refresh_ttl_seconds,
        )
        return cls(codec=codec, cfg=cfg)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def new_jti(self) -> str:
        return str(uuid4())

    def issue_access(self, principal: Principal) -> str:
        now = self.now_utc()
        jti = self.new_jti()
        token = self.codec.encode(
            {
                "sub": principal.id,
                "username": principal.username,
                "roles": sorted(principal.roles),
                "iat": now,
                "exp": now + self.cfg.access_expires,
                "jti": jti,
                "type": TokenKind.ACCESS.value,
            }
        )
        log.debug("token.issued kind=access sub=%s jti=%s", principal.id, jti)
        return token

    def issue_refresh(self, principal: Principal, *, jti: str | None = None) -> str:
        # The refresh jti is the ledger key; callers that must record it
        # before handing the token out pass it in explicitly.
        now = self.now_utc()
        jti = jti or self.new_jti()
        token = self.codec.encode(
            {
                "sub": principal.id,
                "iat": now,
                "exp": now + self.cfg.refresh_expires,
                "jti": jti,
                "type": TokenKind.REFRESH.value,
            }
        )
        log.debug("token.issued kind=refresh sub=%s jti=%s", principal.id, jti)
        return token

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_access(self, token: str) -> TokenClaims:
        return self._verify(token, TokenKind.ACCESS)

    def verify_refresh(self, token: str) -> TokenClaims:
        return self._verify(token, TokenKind.REFRESH)

    def _verify(self, token: str, expected: TokenKind) -> TokenClaims:
        try:
            claims = self.codec.decode(token)
            if claims.kind is not expected:
                raise TokenMalformed(f"Wrong token type: {expected.value} token required.")
        except AuthError as exc:
            log.warning("token.rejected kind=%s reason=%s", expected.value, exc.kind.value)
            raise
        log.debug("token.verified kind=%s sub=%s jti=%s", expected.value, claims.subject, claims.jti)
        return claims

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
