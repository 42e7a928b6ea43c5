from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from enum import Enum, auto
from typing import Protocol


class LedgerState(Enum):
    """State of a refresh jti in the ledger."""

    ABSENT = auto()
    ACTIVE = auto()
    BLACKLISTED = auto()


class RefreshLedgerStore(Protocol):
    """
    Key-value bookkeeping for refresh token ids.

    A jti is either *active* (value: owning principal id) or *blacklisted*,
    never both. Both states expire on their own TTL. ``rotate`` and
    ``revoke`` MUST be atomic with respect to concurrent callers.
    """

    def activate(self, *, jti: str, principal_id: str, ttl: int) -> bool:
        """
        Record ``jti`` as active for ``ttl`` seconds.

        A blacklisted ``jti`` is left untouched.

        :returns: ``True`` when the active entry was written, ``False`` when
            ``jti`` is blacklisted.
        """

    def active_owner(self, jti: str) -> str | None:
        """Return the owning principal id if ``jti`` is active."""

    def state(self, jti: str) -> LedgerState:
        """Return the current state of ``jti``."""

    def rotate(self, *, old_jti: str, owner_id: str, new_jti: str, ttl: int) -> bool:
        """
        Atomically blacklist ``old_jti`` and activate ``new_jti``.

        The swap only happens if ``old_jti`` is still active for ``owner_id``.
        The blacklist entry lives for the remaining lifetime of the active
        entry it replaces.

        :returns: ``True`` when the swap was applied, ``False`` otherwise.
        """

    def revoke(self, jti: str, *, fallback_ttl: int) -> str | None:
        """
        Atomically move an active ``jti`` to the blacklist.

        :param fallback_ttl: Blacklist TTL when the active entry carries none.
        :returns: The owner id that was revoked, or ``None`` when not active.
        """


class InMemoryRefreshLedgerStore(RefreshLedgerStore):
    """
    In-memory ledger with atomic rotation behavior.

    .. note::
       Uses a threading lock to simulate atomicity in unit tests.
    """

    def __init__(self) -> None:
        self._active: dict[str, tuple[str, datetime]] = {}
        self._black: dict[str, datetime] = {}
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _purge(self, jti: str) -> None:
        now = self._now()
        entry = self._active.get(jti)
        if entry and entry[1] <= now:
            del self._active[jti]
        exp = self._black.get(jti)
        if exp and exp <= now:
            del self._black[jti]

    def _remaining(self, jti: str) -> int:
        _, exp = self._active[jti]
        return max(1, int((exp - self._now()).total_seconds()))

    # -------------------------- API ----------------------------

    def activate(self, *, jti: str, principal_id: str, ttl: int) -> bool:
        with self._lock:
            self._purge(jti)
            if jti in self._black:
                return False
            self._active[jti] = (principal_id, self._now() + timedelta(seconds=ttl))
            return True

    def active_owner(self, jti: str) -> str | None:
        with self._lock:
            self._purge(jti)
            entry = self._active.get(jti)
            return entry[0] if entry else None

    def state(self, jti: str) -> LedgerState:
        with self._lock:
            self._purge(jti)
            if jti in self._active:
                return LedgerState.ACTIVE
            if jti in self._black:
                return LedgerState.BLACKLISTED
            return LedgerState.ABSENT

    def rotate(self, *, old_jti: str, owner_id: str, new_jti: str, ttl: int) -> bool:
        with self._lock:
            self._purge(old_jti)
            entry = self._active.get(old_jti)
            if entry is None or entry[0] != owner_id:
                return False
            black_ttl = self._remaining(old_jti)
            del self._active[old_jti]
            self._black[old_jti] = self._now() + timedelta(seconds=black_ttl)
            self._active[new_jti] = (owner_id, self._now() + timedelta(seconds=ttl))
            return True

    def revoke(self, jti: str, *, fallback_ttl: int) -> str | None:
        with self._lock:
            self._purge(jti)
            entry = self._active.get(jti)
            if entry is None:
                return None
            black_ttl = self._remaining(jti)
            del self._active[jti]
            self._black[jti] = self._now() + timedelta(seconds=black_ttl)
            return entry[0]
