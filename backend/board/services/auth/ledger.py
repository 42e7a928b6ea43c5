# board/services/auth/ledger.py
from __future__ import annotations

import logging

from board.repositories.user import UserRepository
from board.services._shared.errors import PrincipalNotFound, RefreshReuseOrUnknown
from board.services._shared.ports import LedgerState, RefreshLedgerStore, TokenProvider
from board.services.auth.dto import TokenPairOut

log = logging.getLogger(__name__)


class RefreshLedger:
    """
    Single-use-then-rotate bookkeeping for refresh tokens.

    State machine per jti: ``absent -> active -> blacklisted -> (TTL) -> absent``.
    There is no path from blacklisted back to active, and revoking an absent
    jti writes nothing.
    """

    def __init__(
        self,
        *,
        tokens: TokenProvider,
        store: RefreshLedgerStore,
        users: UserRepository,
    ) -> None:
        """
        :param tokens: Issues and verifies the token pair.
        :param store: Active/blacklist store with atomic rotation.
        :param users: Source of the principal re-fetched on every rotation.
        """
        self.tokens = tokens
        self.store = store
        self.users = users

    @property
    def refresh_ttl(self) -> int:
        return self.tokens.cfg.refresh_ttl_seconds

    # ------------------------------------------------------------------ #
    # Activation
    # ------------------------------------------------------------------ #

    def activate(self, jti: str, principal_id: str, ttl: int | None = None) -> None:
        """
        Mark ``jti`` active for ``principal_id`` (default TTL: refresh lifetime).

        :raises RefreshReuseOrUnknown: ``jti`` is blacklisted and stays so.
        """
        written = self.store.activate(
            jti=jti, principal_id=principal_id, ttl=ttl or self.refresh_ttl
        )
        if not written:
            log.warning("ledger.activate.blacklisted jti=%s sub=%s", jti, principal_id)
            raise RefreshReuseOrUnknown()
        log.debug("ledger.activated jti=%s sub=%s", jti, principal_id)

    # ------------------------------------------------------------------ #
    # Rotation
    # ------------------------------------------------------------------ #

    def rotate(self, presented_refresh_token: str) -> TokenPairOut:
        """
        Exchange an active refresh token for a new access/refresh pair.

        Security
        --------
        - Signature/expiry failures from the token provider propagate unchanged.
        - A jti that is not active for the token's subject is rejected with
          :class:`RefreshReuseOrUnknown`, whether it was rotated, revoked or
          never issued.
        - The principal is re-fetched so role changes apply to the new access token.
        - The blacklist write and the new activation happen in one store
          transaction guarded by the old jti; if a concurrent request consumed
          it first, the pair minted here is discarded.

        :raises PrincipalNotFound: The token subject no longer exists.
        """
        claims = self.tokens.verify_refresh(presented_refresh_token)
        old_jti, subject = claims.jti, claims.subject

        owner = self.store.active_owner(old_jti)
        if owner is None or owner != subject:
            self._log_rejection(old_jti, subject, owner)
            raise RefreshReuseOrUnknown()

        principal = self.users.find_by_id(subject)
        if principal is None:
            log.warning("ledger.rotate.principal_missing sub=%s jti=%s", subject, old_jti)
            raise PrincipalNotFound()

        new_jti = self.tokens.new_jti()
        access = self.tokens.issue_access(principal)
        refresh = self.tokens.issue_refresh(principal, jti=new_jti)

        if not self.store.rotate(
            old_jti=old_jti, owner_id=subject, new_jti=new_jti, ttl=self.refresh_ttl
        ):
            log.warning("ledger.rotate.lost_race sub=%s jti=%s", subject, old_jti)
            raise RefreshReuseOrUnknown()

        log.info("ledger.rotated sub=%s old_jti=%s new_jti=%s", subject, old_jti, new_jti)
        return TokenPairOut(access_token=access, refresh_token=refresh, refresh_jti=new_jti)

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def revoke(self, jti: str) -> bool:
        """
        Move an active ``jti`` straight to the blacklist.

        :returns: ``True`` if something was revoked. Not finding ``jti`` active
            is a logged no-op, never an error.
        """
        owner = self.store.revoke(jti, fallback_ttl=self.refresh_ttl)
        if owner is None:
            log.info("ledger.revoke.noop jti=%s", jti)
            return False
        log.info("ledger.revoked jti=%s sub=%s", jti, owner)
        return True

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _log_rejection(self, jti: str, subject: str, owner: str | None) -> None:
        if owner is not None:
            log.warning("ledger.rotate.subject_mismatch jti=%s sub=%s", jti, subject)
        elif self.store.state(jti) is LedgerState.BLACKLISTED:
            # Replay of a consumed token; the caller sees the generic error.
            log.warning("ledger.rotate.reuse_detected jti=%s sub=%s", jti, subject)
        else:
            log.warning("ledger.rotate.unknown_jti jti=%s sub=%s", jti, subject)
