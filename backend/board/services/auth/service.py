# board/services/auth/service.py
from __future__ import annotations

import logging

from board.models.principal import Principal, normalize_email, normalize_username
from board.repositories.user import UserRepository
from board.services._shared.base import BaseService, ServiceContext
from board.services._shared.errors import (
    AuthError,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    ServiceError,
)
from board.services._shared.ports import TokenProvider
from board.services.auth.dto import SigninIn, SignupIn, TokenClaims, TokenPairOut
from board.services.auth.ledger import RefreshLedger

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (signup / signin / refresh / signout).

    Issues JWTs via a pluggable :class:`TokenProvider` and keeps refresh
    tokens single-use through the :class:`RefreshLedger`. Access tokens are
    never looked up server-side.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenProvider,
        ledger: RefreshLedger,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param users: Principal persistence.
        :param tokens: Adapter for issuing/verifying JWTs.
        :param ledger: Refresh-token rotation and revocation.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.users = users
        self.tokens = tokens
        self.ledger = ledger

    # ------------------------------------------------------------------ #
    # Signup
    # ------------------------------------------------------------------ #

    def signup(self, dto: SignupIn) -> Principal:
        """
        Create a principal with the default role.

        :raises ServiceError: Username or email fails domain normalization.
        :raises ConflictError: Username or email already registered.
        """
        try:
            normalize_username(dto.username)
            normalize_email(dto.email)
        except ValueError as exc:
            log.warning("auth.signup.rejected reason=%s", exc)
            raise ServiceError(str(exc)) from exc

        if self.users.exists_by_username(dto.username):
            log.warning("auth.signup.duplicate_username username=%s", dto.username)
            raise ConflictError("User", "Username already exists")
        if self.users.exists_by_email(dto.email):
            log.warning("auth.signup.duplicate_email")
            raise ConflictError("User", "Email already exists")

        principal = Principal.new(username=dto.username, email=dto.email, password=dto.password)
        return self.users.add(principal)

    # ------------------------------------------------------------------ #
    # Signin
    # ------------------------------------------------------------------ #

    def signin(self, dto: SigninIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises InvalidCredentials: Unknown username or wrong password.
        """
        principal = self.users.find_by_username(dto.username)
        if principal is None or not principal.verify_password(dto.password):
            log.warning("auth.signin.failed username=%s", dto.username)
            raise InvalidCredentials()

        # --- Record the refresh jti FIRST (server state), then issue JWTs ---
        rt_jti = self.tokens.new_jti()
        self.ledger.activate(rt_jti, principal.id)

        access = self.tokens.issue_access(principal)
        refresh = self.tokens.issue_refresh(principal, jti=rt_jti)
        log.info("auth.signin.ok sub=%s", principal.id)
        return TokenPairOut(access_token=access, refresh_token=refresh, refresh_jti=rt_jti)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> TokenPairOut:
        """Rotate ``refresh_token``; see :meth:`RefreshLedger.rotate`."""
        return self.ledger.rotate(refresh_token)

    # ------------------------------------------------------------------ #
    # Signout
    # ------------------------------------------------------------------ #

    def signout(self, refresh_token: str | None) -> bool:
        """
        Revoke the refresh token carried by the client, if any.

        Signout never fails because the token was already consumed, expired or
        unreadable; those cases are logged. Store outages during revocation
        still propagate.

        :returns: ``True`` if an active refresh token was revoked.
        """
        if not refresh_token:
            return False
        try:
            claims = self.tokens.verify_refresh(refresh_token)
        except AuthError as exc:
            log.warning("auth.signout.unreadable_token reason=%s", exc.kind.value)
            return False
        return self.ledger.revoke(claims.jti)

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str) -> TokenClaims:
        """Verify a bearer access token (signature and expiry only)."""
        return self.tokens.verify_access(access_token)

    def whoami(self, principal_id: str) -> Principal:
        """
        Return the current principal.

        :raises NotFoundError: The principal was removed after token issuance.
        """
        principal = self.users.find_by_id(principal_id)
        if principal is None:
            raise NotFoundError("User", principal_id)
        return principal
