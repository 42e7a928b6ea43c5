from __future__ import annotations

from board.repositories import POSTS_ZSET_KEY

from tests.factories import PostFactory


def test_add_writes_hash_and_index(posts, fake_redis):
    post = posts.add(PostFactory(message="hello", created=1234))

    assert fake_redis.hgetall(f"post:{post.id}") == {
        "id": post.id,
        "message": "hello",
        "created": "1234",
        "userId": post.user_id,
    }
    assert fake_redis.zscore(POSTS_ZSET_KEY, post.id) == 1234


def test_list_recent_orders_and_limits(posts):
    created = [posts.add(PostFactory(created=ts)) for ts in (10, 30, 20)]

    assert [p.created for p in posts.list_recent()] == [30, 20, 10]
    assert [p.id for p in posts.list_recent(limit=1)] == [created[1].id]


def test_list_skips_dangling_index_entries(posts, fake_redis):
    post = posts.add(PostFactory())
    fake_redis.zadd(POSTS_ZSET_KEY, {"ghost": 1})

    assert [p.id for p in posts.list_recent()] == [post.id]


def test_list_empty(posts):
    assert posts.list_recent() == []


def test_delete(posts, fake_redis):
    post = posts.add(PostFactory())

    assert posts.delete(post.id) is True
    assert fake_redis.zscore(POSTS_ZSET_KEY, post.id) is None
    assert posts.delete(post.id) is False
