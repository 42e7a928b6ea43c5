# board/infra/redis/redis_refresh_ledger_store.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]

from board.infra.redis.errors import store_call
from board.services._shared.ports import LedgerState, RefreshLedgerStore

BLACKLIST_MARKER = "1"
MAX_WATCH_RETRIES = 16

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisRefreshLedgerStore(RefreshLedgerStore):
    """
    Redis-backed refresh ledger with atomic rotation.

    Keys
    ----
    ``rt:active:{jti}`` -> owner principal id, TTL = refresh lifetime.
    ``rt:black:{jti}``  -> ``"1"``, TTL = remaining lifetime of the active entry.

    :param r: A Redis client created with ``decode_responses=True``.
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _ka(jti: str) -> str:
        return f"rt:active:{jti}"

    @staticmethod
    def _kb(jti: str) -> str:
        return f"rt:black:{jti}"

    @staticmethod
    def _black_ttl(remaining: int, fallback: int) -> int:
        # TTL returns -1 (no expiry) or -2 (missing); neither is usable here
        return remaining if remaining > 0 else max(1, fallback)

    # -------------------- API ------------------------

    @store_call
    def activate(self, *, jti: str, principal_id: str, ttl: int) -> bool:
        """
        Record ``jti`` as active unless it is already blacklisted.

        The blacklist key is watched so a concurrent revoke or rotation that
        writes the marker between the check and EXEC aborts the write.
        """
        k_black = self._kb(jti)

        for _ in range(MAX_WATCH_RETRIES):
            try:
                with self.r.pipeline() as p:
                    p.watch(k_black)

                    if p.exists(k_black):
                        p.unwatch()
                        return False

                    p.multi()
                    p.setex(self._ka(jti), max(1, int(ttl)), principal_id)
                    p.execute()
                return True
            except redis.WatchError:
                log.debug("ledger.activate.watch_conflict jti=%s", jti)
                continue

        log.warning("ledger.activate.contended jti=%s", jti)
        return False

    @store_call
    def active_owner(self, jti: str) -> str | None:
        return cast("str | None", self.r.get(self._ka(jti)))

    @store_call
    def state(self, jti: str) -> LedgerState:
        if self.r.exists(self._ka(jti)):
            return LedgerState.ACTIVE
        if self.r.exists(self._kb(jti)):
            return LedgerState.BLACKLISTED
        return LedgerState.ABSENT

    @store_call
    def rotate(self, *, old_jti: str, owner_id: str, new_jti: str, ttl: int) -> bool:
        """
        Atomically consume ``old_jti`` and activate ``new_jti``.

        Uses Redis WATCH/MULTI/EXEC (optimistic locking):
        - Watch the old active key.
        - Re-read its owner; abort unless it still belongs to ``owner_id``.
        - Delete it, write the blacklist marker and the new active key in one
          transaction.
        A concurrent rotation or revoke of the same jti touches the watched
        key, so EXEC fails and the loop re-reads the (now absent) owner.
        """
        k_old = self._ka(old_jti)

        for _ in range(MAX_WATCH_RETRIES):
            try:
                with self.r.pipeline() as p:
                    p.watch(k_old)

                    current = p.get(k_old)
                    if current is None or current != owner_id:
                        p.unwatch()
                        return False
                    black_ttl = self._black_ttl(int(p.ttl(k_old)), ttl)

                    p.multi()
                    p.delete(k_old)
                    p.setex(self._kb(old_jti), black_ttl, BLACKLIST_MARKER)
                    p.setex(self._ka(new_jti), max(1, int(ttl)), owner_id)
                    p.execute()
                return True
            except redis.WatchError:
                # Concurrent modification detected; retry loop
                log.debug("ledger.rotate.watch_conflict jti=%s", old_jti)
                continue

        log.warning("ledger.rotate.contended jti=%s", old_jti)
        return False

    @store_call
    def revoke(self, jti: str, *, fallback_ttl: int) -> str | None:
        k_active = self._ka(jti)

        for _ in range(MAX_WATCH_RETRIES):
            try:
                with self.r.pipeline() as p:
                    p.watch(k_active)

                    owner = p.get(k_active)
                    if owner is None:
                        p.unwatch()
                        return None
                    black_ttl = self._black_ttl(int(p.ttl(k_active)), fallback_ttl)

                    p.multi()
                    p.delete(k_active)
                    p.setex(self._kb(jti), black_ttl, BLACKLIST_MARKER)
                    p.execute()
                return cast(str, owner)
            except redis.WatchError:
                log.debug("ledger.revoke.watch_conflict jti=%s", jti)
                continue

        log.warning("ledger.revoke.contended jti=%s", jti)
        return None
