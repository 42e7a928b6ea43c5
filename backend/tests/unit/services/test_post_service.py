from __future__ import annotations

import pytest
from board.services._shared.base import ServiceContext
from board.services._shared.errors import AuthorizationError, NotFoundError, ServiceError
from board.services.posts import PostService

from tests.factories import PostFactory


def _service(posts, *, roles=frozenset({"user"}), actor_id="user-1", max_length=1000):
    ctx = ServiceContext(actor_id=actor_id, username="alice", roles=frozenset(roles))
    return PostService(posts=posts, max_length=max_length, ctx=ctx)


def test_create_trims_and_attributes(posts):
    post = _service(posts).create_post("  hello board  ")

    assert post.message == "hello board"
    assert post.user_id == "user-1"
    assert posts.get(post.id) == post


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
def test_create_rejects_blank(posts, message):
    with pytest.raises(ServiceError, match="Message is required"):
        _service(posts).create_post(message)


def test_create_enforces_max_length(posts):
    service = _service(posts, max_length=5)
    assert service.create_post("12345").message == "12345"
    with pytest.raises(ServiceError):
        service.create_post("123456")


def test_create_requires_actor(posts):
    with pytest.raises(ServiceError):
        PostService(posts=posts).create_post("hi")


def test_list_newest_first(posts):
    older = posts.add(PostFactory(created=1_000))
    newer = posts.add(PostFactory(created=2_000))

    assert [p.id for p in _service(posts).list_posts()] == [newer.id, older.id]


def test_delete_requires_admin(posts):
    post = posts.add(PostFactory())

    with pytest.raises(AuthorizationError):
        _service(posts).delete_post(post.id)
    assert posts.get(post.id) is not None


def test_admin_delete_and_missing(posts):
    post = posts.add(PostFactory())
    admin = _service(posts, roles={"user", "admin"})

    admin.delete_post(post.id)
    assert posts.get(post.id) is None

    with pytest.raises(NotFoundError):
        admin.delete_post(post.id)
