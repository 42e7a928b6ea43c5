"""Redis repository for :class:`board.models.post.Post`."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]

from board.infra.redis.errors import store_call
from board.models.post import Post

POSTS_ZSET_KEY = "posts_zset"

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PostRepository:
    """
    Persistence for posts: one hash per post plus a sorted-set index scored
    by creation time (epoch ms).

    :param r: A Redis client created with ``decode_responses=True``.
    """

    r: redis.Redis

    @staticmethod
    def _k(post_id: str) -> str:
        return f"post:{post_id}"

    @store_call
    def add(self, post: Post) -> Post:
        with self.r.pipeline(transaction=True) as p:
            p.hset(self._k(post.id), mapping=post.to_hash())
            p.zadd(POSTS_ZSET_KEY, {post.id: post.created})
            p.execute()
        log.debug("post.saved id=%s", post.id)
        return post

    @store_call
    def get(self, post_id: str) -> Post | None:
        data = self.r.hgetall(self._k(post_id))
        return Post.from_hash(data) if data else None

    @store_call
    def list_recent(self, limit: int | None = None) -> list[Post]:
        """Return posts newest first; index entries whose hash vanished are skipped."""
        stop = -1 if limit is None else max(limit, 1) - 1
        ids = self.r.zrevrange(POSTS_ZSET_KEY, 0, stop)
        if not ids:
            return []
        with self.r.pipeline(transaction=False) as p:
            for post_id in ids:
                p.hgetall(self._k(post_id))
            rows = p.execute()
        return [Post.from_hash(row) for row in rows if row]

    @store_call
    def delete(self, post_id: str) -> bool:
        """
        Remove a post and its index entry.

        :returns: ``True`` if the post existed.
        """
        with self.r.pipeline(transaction=True) as p:
            p.delete(self._k(post_id))
            p.zrem(POSTS_ZSET_KEY, post_id)
            deleted, _ = p.execute()
        return bool(deleted)
