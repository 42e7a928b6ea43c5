from __future__ import annotations

from typing import Protocol

from board.models.principal import Principal
from board.services.auth.dto import AuthTokenConfig, TokenClaims


class TokenProvider(Protocol):
    """Port for issuing and verifying signed tokens."""

    cfg: AuthTokenConfig

    def new_jti(self) -> str: ...

    def issue_access(self, principal: Principal) -> str: ...

    def issue_refresh(self, principal: Principal, *, jti: str | None = None) -> str: ...

    def verify_access(self, token: str) -> TokenClaims: ...

    def verify_refresh(self, token: str) -> TokenClaims: ...
