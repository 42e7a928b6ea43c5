"""Post CRUD service."""

from __future__ import annotations

from .service import PostService

__all__ = ["PostService"]
