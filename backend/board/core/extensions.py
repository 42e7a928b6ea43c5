"""Redis client and token service wiring for the Flask app."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from board.infra.jwt.token_service import JWTTokenService
from board.services._shared.errors import StoreUnavailable

REDIS_KEY = "redis_client"
TOKENS_KEY = "token_service"

log = logging.getLogger(__name__)


def build_redis(
    url: str,
    *,
    max_connections: int = 20,
    pool_timeout: int = 5,
    socket_timeout: int = 5,
) -> redis.Redis:
    """Create a client over a :class:`redis.BlockingConnectionPool`.

    Checkout blocks at most ``pool_timeout`` seconds before redis-py raises
    ``ConnectionError``, which the store layer surfaces as
    :class:`StoreUnavailable`.
    """
    pool = redis.BlockingConnectionPool.from_url(
        url,
        max_connections=max_connections,
        timeout=pool_timeout,
        socket_timeout=socket_timeout,
        decode_responses=True,
    )
    return redis.Redis(connection_pool=pool)


def init_app(app: Flask) -> None:
    """Initialize the token service and (when configured) the Redis client.

    Parameters
    ----------
    app: flask.Flask
        Application receiving the extensions. ``JWT_HS256_SECRET`` must be
        set; a missing secret raises :class:`ConfigError` here and aborts
        startup. When ``REDIS_URL`` is empty no client is created and one must
        be attached with :func:`set_redis` (the test suite does this).
    """
    app.extensions[TOKENS_KEY] = JWTTokenService.from_config(app.config)

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.extensions.pop(REDIS_KEY, None)
        return

    client = build_redis(
        redis_url,
        max_connections=int(app.config.get("REDIS_MAX_CONNECTIONS", 20)),
        pool_timeout=int(app.config.get("REDIS_POOL_TIMEOUT", 5)),
        socket_timeout=int(app.config.get("REDIS_SOCKET_TIMEOUT", 5)),
    )
    try:
        client.ping()
    except RedisError as exc:
        log.error("redis.unreachable url=%s", redis_url, exc_info=True)
        raise StoreUnavailable(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions[REDIS_KEY] = client


def set_redis(app: Flask, client: redis.Redis) -> None:
    """Attach an externally built client (e.g. ``fakeredis``) to ``app``."""
    app.extensions[REDIS_KEY] = client


def get_redis() -> redis.Redis:
    """Return the Redis client bound to the current application."""
    client = current_app.extensions.get(REDIS_KEY)
    if client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return client


def get_token_service() -> JWTTokenService:
    """Return the token service bound to the current application."""
    return current_app.extensions[TOKENS_KEY]
