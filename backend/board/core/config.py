"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


def redis_url_from_env() -> str:
    """Return ``REDIS_URL`` or build one from ``REDIS_HOST``/``REDIS_PORT``."""
    url = os.getenv("REDIS_URL")
    if url:
        return url
    host = os.getenv("REDIS_HOST", "localhost")
    port = env_int("REDIS_PORT", 6379)
    return f"redis://{host}:{port}/0"


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_HS256_SECRET: str | None
        Shared HMAC secret for access and refresh tokens. Required; the
        application factory refuses to start without it.
    JWT_ACCESS_TTL_SEC: int
        Access token lifetime in seconds (10 minutes by default).
    JWT_REFRESH_TTL_SEC: int
        Refresh token lifetime in seconds (7 days by default). Also the TTL
        of refresh ledger entries.
    JWT_CLOCK_SKEW_SEC: int
        Tolerance applied to ``exp`` when verifying tokens.
    REDIS_URL: str | None
        Connection URL for the key-value store. ``None`` skips client setup
        (tests inject their own client).
    REDIS_MAX_CONNECTIONS: int
        Size of the blocking connection pool.
    REDIS_POOL_TIMEOUT: int
        Seconds a request waits for a free pooled connection before failing.
    REFRESH_COOKIE_NAME: str
        Cookie carrying the refresh token.
    REFRESH_COOKIE_SECURE: bool
        Emits the ``Secure`` attribute on the refresh cookie.
    POST_MAX_LENGTH: int
        Maximum length of a post message after trimming.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    USE_PROXYFIX: bool
        Trust one hop of ``X-Forwarded-*`` headers (set behind a proxy).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Tokens
    JWT_HS256_SECRET = os.getenv("JWT_HS256_SECRET")
    JWT_ACCESS_TTL_SEC = env_int("JWT_ACCESS_TTL_SEC", 600)
    JWT_REFRESH_TTL_SEC = env_int("JWT_REFRESH_TTL_SEC", 604800)
    JWT_CLOCK_SKEW_SEC = env_int("JWT_CLOCK_SKEW_SEC", 60)

    # Redis
    REDIS_URL: str | None = redis_url_from_env()
    REDIS_MAX_CONNECTIONS = env_int("REDIS_MAX_CONNECTIONS", 20)
    REDIS_POOL_TIMEOUT = env_int("REDIS_POOL_TIMEOUT", 5)
    REDIS_SOCKET_TIMEOUT = env_int("REDIS_SOCKET_TIMEOUT", 5)

    # Refresh cookie
    REFRESH_COOKIE_NAME = "refreshToken"
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", True)
    REFRESH_COOKIE_SAMESITE = "Lax"
    REFRESH_COOKIE_PATH = "/api/auth"

    # Posts
    POST_MAX_LENGTH = env_int("POST_MAX_LENGTH", 1000)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", False)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. The refresh cookie drops ``Secure`` unless
    explicitly requested so it survives plain ``http://localhost``.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Leaves ``REDIS_URL`` unset; the test suite injects ``fakeredis``.
    - Uses a fixed signing secret unless ``JWT_HS256_SECRET`` is set.
    """

    TESTING = True
    DEBUG = False
    JWT_HS256_SECRET = os.getenv("JWT_HS256_SECRET", "testing-secret-with-enough-entropy-0123456789")
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug disabled and always marks the refresh cookie ``Secure``.
    """

    DEBUG = False
    REFRESH_COOKIE_SECURE = True
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
