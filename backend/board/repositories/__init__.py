"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from board.repositories.post import POSTS_ZSET_KEY, PostRepository
from board.repositories.user import UserRepository

__all__ = ["POSTS_ZSET_KEY", "PostRepository", "UserRepository"]
