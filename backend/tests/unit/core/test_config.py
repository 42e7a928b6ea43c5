from __future__ import annotations

import pytest
from board.core import config
from board.core.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from board.factory import create_app
from board.services._shared.errors import ConfigError


@pytest.mark.parametrize(
    "name,expected",
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_follows_app_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    monkeypatch.setenv("NUM", " 42 ")
    assert config.env_bool("FLAG") is True
    assert config.env_bool("UNSET_FLAG", True) is True
    assert config.env_int("NUM", 1) == 42
    assert config.env_int("UNSET_NUM", 7) == 7


def test_redis_url_from_host_and_port(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("REDIS_HOST", "cache")
    monkeypatch.setenv("REDIS_PORT", "6380")
    assert config.redis_url_from_env() == "redis://cache:6380/0"

    monkeypatch.setenv("REDIS_URL", "redis://other:1/2")
    assert config.redis_url_from_env() == "redis://other:1/2"


def test_defaults():
    assert TestingConfig.JWT_ACCESS_TTL_SEC == 600
    assert TestingConfig.JWT_REFRESH_TTL_SEC == 604800
    assert TestingConfig.JWT_CLOCK_SKEW_SEC == 60
    assert TestingConfig.REFRESH_COOKIE_NAME == "refreshToken"
    assert TestingConfig.POST_MAX_LENGTH == 1000


def test_missing_secret_is_fatal_at_startup():
    class NoSecret(TestingConfig):
        JWT_HS256_SECRET = ""

    with pytest.raises(ConfigError):
        create_app(NoSecret, instance_relative_config=False)
