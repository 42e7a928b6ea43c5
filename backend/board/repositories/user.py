"""Redis repository for :class:`board.models.principal.Principal`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]

from board.infra.redis.errors import store_call
from board.models.principal import Principal, normalize_email, normalize_username
from board.services._shared.errors import ConflictError, NotFoundError

log = logging.getLogger(__name__)


@dataclass(slots=True)
class UserRepository:
    """
    Persistence for principals.

    Keys
    ----
    ``user:{id}``               hash (id, username, email, pass_hash)
    ``user:{id}:roles``         set of role names
    ``user:byname:{username}``  -> id (unique index)
    ``user:byemail:{email}``    -> id (unique index, email lower-cased)

    :param r: A Redis client created with ``decode_responses=True``.
    """

    r: redis.Redis

    # -------------------- keys --------------------

    @staticmethod
    def _k(user_id: str) -> str:
        return f"user:{user_id}"

    @staticmethod
    def _kr(user_id: str) -> str:
        return f"user:{user_id}:roles"

    @staticmethod
    def _kn(username: str) -> str:
        return f"user:byname:{username}"

    @staticmethod
    def _ke(email: str) -> str:
        return f"user:byemail:{email}"

    # -------------------- reads --------------------

    @store_call
    def find_by_id(self, user_id: str) -> Principal | None:
        data = self.r.hgetall(self._k(user_id))
        if not data:
            log.debug("user.not_found id=%s", user_id)
            return None
        roles = cast(set[str], self.r.smembers(self._kr(user_id)))
        return Principal.from_hash(data, roles)

    @store_call
    def find_by_username(self, username: str) -> Principal | None:
        user_id = self.r.get(self._kn(normalize_username(username)))
        if user_id is None:
            return None
        return self.find_by_id(user_id)

    @store_call
    def exists_by_username(self, username: str) -> bool:
        return bool(self.r.exists(self._kn(normalize_username(username))))

    @store_call
    def exists_by_email(self, email: str) -> bool:
        return bool(self.r.exists(self._ke(normalize_email(email))))

    # -------------------- writes --------------------

    @store_call
    def add(self, principal: Principal) -> Principal:
        """
        Persist a new principal.

        The unique indexes are claimed first with ``SET NX`` so two concurrent
        signups for the same handle cannot both succeed.

        :raises ConflictError: Username or email already taken.
        """
        k_name = self._kn(principal.username)
        k_email = self._ke(principal.email)

        if not self.r.set(k_name, principal.id, nx=True):
            raise ConflictError("User", "Username already exists")
        if not self.r.set(k_email, principal.id, nx=True):
            self.r.delete(k_name)
            raise ConflictError("User", "Email already exists")

        with self.r.pipeline(transaction=True) as p:
            p.hset(self._k(principal.id), mapping=principal.to_hash())
            if principal.roles:
                p.sadd(self._kr(principal.id), *sorted(principal.roles))
            p.execute()
        log.info("user.created id=%s username=%s", principal.id, principal.username)
        return principal

    @store_call
    def grant_role(self, user_id: str, role: str) -> bool:
        """
        Add ``role`` to a principal.

        :returns: ``True`` if the role was newly granted.
        :raises NotFoundError: Unknown principal.
        """
        if not self.r.exists(self._k(user_id)):
            raise NotFoundError("User", user_id)
        added = bool(self.r.sadd(self._kr(user_id), role))
        log.info("user.role_granted id=%s role=%s new=%s", user_id, role, added)
        return added
