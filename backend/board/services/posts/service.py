# board/services/posts/service.py
from __future__ import annotations

import logging

from board.models.post import Post
from board.repositories.post import PostRepository
from board.services._shared.base import BaseService, ServiceContext
from board.services._shared.errors import NotFoundError, ServiceError
from board.services._shared.policies.common import ADMIN_ROLE

DEFAULT_MAX_LENGTH = 1000

log = logging.getLogger(__name__)


class PostService(BaseService):
    """Bulletin board posts: public listing, authenticated create, admin delete."""

    def __init__(
        self,
        *,
        posts: PostRepository,
        max_length: int = DEFAULT_MAX_LENGTH,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.posts = posts
        self.max_length = max_length

    def list_posts(self, limit: int | None = None) -> list[Post]:
        return self.posts.list_recent(limit)

    def create_post(self, message: str) -> Post:
        """
        Publish ``message`` (trimmed) on behalf of the context's actor.

        :raises ServiceError: Blank or over-long message, or anonymous context.
        """
        if self.ctx.actor_id is None:
            raise ServiceError("Authentication required")
        text = (message or "").strip()
        if not text:
            raise ServiceError("Message is required")
        if len(text) > self.max_length:
            raise ServiceError(f"Message must be at most {self.max_length} characters")
        post = self.posts.add(Post.new(message=text, user_id=self.ctx.actor_id))
        log.info("post.created id=%s sub=%s length=%s", post.id, self.ctx.actor_id, len(text))
        return post

    def delete_post(self, post_id: str) -> None:
        """
        Delete a post. Requires the ``admin`` role.

        :raises AuthorizationError: Actor is not an admin.
        :raises NotFoundError: Unknown post id.
        """
        try:
            self.ensure_role(ADMIN_ROLE, msg="Admin privileges required")
        except ServiceError:
            log.warning("post.delete.denied id=%s user=%s", post_id, self.ctx.username)
            raise
        if not self.posts.delete(post_id):
            log.warning("post.delete.not_found id=%s", post_id)
            raise NotFoundError("Post", post_id)
        log.info("post.deleted id=%s by=%s", post_id, self.ctx.username)
