"""Pytest fixtures wiring the app to an in-memory Redis.

Every test gets its own :class:`fakeredis.FakeRedis` so ledger, user and post
keys never leak between cases.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import fakeredis
import pytest
from board.core.config import TestingConfig
from board.core.extensions import set_redis
from board.factory import create_app
from board.infra.jwt.codec import TokenCodec
from board.infra.jwt.token_service import JWTTokenService
from board.infra.redis.redis_refresh_ledger_store import RedisRefreshLedgerStore
from board.repositories import PostRepository, UserRepository
from board.services._shared.ports import InMemoryRefreshLedgerStore
from board.services.auth.dto import AuthTokenConfig
from board.services.auth.ledger import RefreshLedger
from board.services.auth.service import AuthService

from tests.helpers.auth import TEST_SECRET


class TestConfig(TestingConfig):
    """Testing configuration with a fixed secret and plain-HTTP cookies."""

    JWT_HS256_SECRET = TEST_SECRET
    REFRESH_COOKIE_SECURE = False
    LOG_LEVEL = "WARNING"


# ------------------------------- Storage ---------------------------------- #
@pytest.fixture
def redis_server():
    """Provide a dedicated fake server (toggle ``connected`` to simulate outages)."""
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(redis_server):
    """Provide a fresh FakeRedis client that decodes responses to ``str``."""
    r = fakeredis.FakeRedis(server=redis_server, decode_responses=True)
    r.flushall()
    return r


@pytest.fixture
def users(fake_redis) -> UserRepository:
    return UserRepository(fake_redis)


@pytest.fixture
def posts(fake_redis) -> PostRepository:
    return PostRepository(fake_redis)


# ------------------------------- Tokens ----------------------------------- #
@pytest.fixture
def token_service() -> JWTTokenService:
    """Token service with default lifetimes (600s / 7d, 60s skew)."""
    return JWTTokenService(codec=TokenCodec(TEST_SECRET), cfg=AuthTokenConfig())


@pytest.fixture(params=["memory", "redis"])
def ledger_store(request, fake_redis):
    """Run ledger tests against both store adapters."""
    if request.param == "memory":
        return InMemoryRefreshLedgerStore()
    return RedisRefreshLedgerStore(fake_redis)


@pytest.fixture
def ledger(token_service, fake_redis, users) -> RefreshLedger:
    return RefreshLedger(
        tokens=token_service, store=RedisRefreshLedgerStore(fake_redis), users=users
    )


@pytest.fixture
def auth_service(token_service, ledger, users) -> AuthService:
    return AuthService(users=users, tokens=token_service, ledger=ledger)


# --------------------------------- App ------------------------------------ #
@pytest.fixture
def app(fake_redis):
    """Create a Flask application bound to the per-test FakeRedis."""
    application = create_app(TestConfig, instance_relative_config=False)
    set_redis(application, fake_redis)
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cli_runner(app):
    return app.test_cli_runner()


# -------------------------------- Helpers --------------------------------- #
@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01") as frozen:
    ...         frozen.tick(61)
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01 12:00:00")

    return _factory
