# board/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass, field

from board.services._shared.errors import AuthorizationError
from board.services._shared.policies.common import has_role


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids).

    :param actor_id: Authenticated principal id (token subject).
    :param username: Authenticated principal username.
    :param roles: Roles embedded in the verified access token.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: str | None = None
    username: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Hold the request-scoped :class:`ServiceContext`.
    * Offer shared authorization helpers so services stay DRY.

    Notes
    -----
    - Services never touch Flask globals; the API layer builds the context.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (auth, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # --------------------------- AuthZ --------------------------------

    def ensure_role(self, role: str, *, msg: str | None = None) -> None:
        """
        Ensure the current actor carries ``role``.

        :raises AuthorizationError: If the role is missing.
        """
        if not has_role(self.ctx.roles, role):
            raise AuthorizationError(msg or f"Role '{role}' required")
