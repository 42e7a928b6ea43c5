"""API blueprint package mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries, e.g. ``"/api"``.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.rstrip("/"), rel_prefix.strip("/")] if segment
        )
        full_prefix = "/" + full_prefix if not full_prefix.startswith("/") else full_prefix
        app.register_blueprint(bp, url_prefix=full_prefix)


def init_app(app: Flask) -> None:
    """Register all API blueprints on the Flask app."""

    from .auth import bp as auth_bp
    from .health import bp as health_bp
    from .posts import bp as posts_bp

    # Each tuple: (blueprint, url_prefix_relative_to_base)
    registry: list[tuple[Blueprint, str]] = [
        (health_bp, ""),  # -> /api/health
        (auth_bp, "/auth"),  # -> /api/auth
        (posts_bp, "/posts"),  # -> /api/posts
    ]
    register_blueprint_group(
        app, base_prefix=app.config.get("API_BASE_PREFIX", "/api"), entries=registry
    )


__all__ = ["init_app", "register_blueprint_group"]
