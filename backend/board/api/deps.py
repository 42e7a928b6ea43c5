"""Shared API helpers: service providers, bearer auth and cookie handling."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from board.core.extensions import get_redis, get_token_service
from board.core.errors import TokenMissing
from board.core.logger import ensure_request_id
from board.infra.redis.redis_refresh_ledger_store import RedisRefreshLedgerStore
from board.repositories import PostRepository, UserRepository
from board.services._shared.base import ServiceContext
from board.services.auth.ledger import RefreshLedger
from board.services.auth.service import AuthService
from board.services.posts import PostService

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": request.endpoint,
                    "method": request.method,
                    "elapsed_ms": round(elapsed_ms, 2),
                },
            )

    return wrapper  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------


def current_context() -> ServiceContext:
    """Return the request's service context (anonymous until authenticated)."""

    ctx = getattr(g, "service_ctx", None)
    if ctx is None:
        ctx = ServiceContext(request_id=ensure_request_id())
        g.service_ctx = ctx
    return ctx


def auth_service() -> AuthService:
    r = get_redis()
    tokens = get_token_service()
    users = UserRepository(r)
    ledger = RefreshLedger(tokens=tokens, store=RedisRefreshLedgerStore(r), users=users)
    return AuthService(users=users, tokens=tokens, ledger=ledger, ctx=current_context())


def post_service() -> PostService:
    return PostService(
        posts=PostRepository(get_redis()),
        max_length=int(current_app.config.get("POST_MAX_LENGTH", 1000)),
        ctx=current_context(),
    )


# ---------------------------------------------------------------------------
# Bearer authentication
# ---------------------------------------------------------------------------


def bearer_token() -> str | None:
    """Extract the token from ``Authorization: Bearer <token>`` (scheme is case-insensitive)."""

    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def require_auth(func: F) -> F:
    """Verify the bearer access token and bind its claims to the request context."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is None:
            raise TokenMissing()
        claims = get_token_service().verify_access(token)
        g.claims = claims
        g.service_ctx = ServiceContext(
            actor_id=claims.subject,
            username=claims.username,
            roles=claims.roles or frozenset(),
            request_id=ensure_request_id(),
        )
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Refresh cookie
# ---------------------------------------------------------------------------


def refresh_cookie() -> str | None:
    name = current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken")
    return request.cookies.get(name) or None


def set_refresh_cookie(response: Response, token: str, *, max_age: int) -> None:
    """Attach the refresh token as an ``HttpOnly`` cookie scoped to the auth routes."""

    cfg = current_app.config
    response.set_cookie(
        cfg.get("REFRESH_COOKIE_NAME", "refreshToken"),
        token,
        max_age=max_age,
        path=cfg.get("REFRESH_COOKIE_PATH", "/api/auth"),
        secure=bool(cfg.get("REFRESH_COOKIE_SECURE", True)),
        httponly=True,
        samesite=cfg.get("REFRESH_COOKIE_SAMESITE", "Lax"),
    )


def clear_refresh_cookie(response: Response) -> None:
    set_refresh_cookie(response, "", max_age=0)
