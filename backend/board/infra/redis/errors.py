"""Translation of redis-py connectivity failures into service errors."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from redis.exceptions import ConnectionError as RedisConnectionError  # type: ignore[import-untyped]
from redis.exceptions import TimeoutError as RedisTimeoutError  # type: ignore[import-untyped]

from board.services._shared.errors import StoreUnavailable

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def store_call(func: F) -> F:
    """
    Wrap a store method so pool exhaustion and connectivity errors surface as
    :class:`StoreUnavailable`.

    Other ``RedisError`` subclasses (protocol errors, bad commands) propagate
    untouched; they are programming errors, not outages.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            log.error("store.unavailable op=%s", func.__qualname__, exc_info=True)
            raise StoreUnavailable() from exc

    return wrapper  # type: ignore[return-value]
