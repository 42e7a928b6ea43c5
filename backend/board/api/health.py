"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from board.api.deps import json_response, timing
from board.core.extensions import get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Report process liveness and Redis reachability."""

    redis_status = "ok"
    try:
        get_redis().ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        redis_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    return json_response({"status": "ok", "redis": redis_status, "version": version})
