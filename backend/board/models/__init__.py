"""Domain models persisted in the key-value store."""

from __future__ import annotations

from .post import Post
from .principal import DEFAULT_ROLE, Principal

__all__ = ["DEFAULT_ROLE", "Post", "Principal"]
