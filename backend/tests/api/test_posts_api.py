from __future__ import annotations

import pytest
from board.repositories import PostRepository, UserRepository

from tests.factories import PostFactory
from tests.helpers.http import json_headers, signin, signup


@pytest.fixture
def alice_token(client):
    signup(client, "alice")
    return signin(client, "alice").get_json()["data"]["accessToken"]


@pytest.fixture
def admin_token(client, fake_redis):
    signup(client, "root")
    users = UserRepository(fake_redis)
    users.grant_role(users.find_by_username("root").id, "admin")
    return signin(client, "root").get_json()["data"]["accessToken"]


def test_list_is_public_and_newest_first(client, fake_redis):
    posts = PostRepository(fake_redis)
    older = posts.add(PostFactory(message="first", created=1_000))
    newer = posts.add(PostFactory(message="second", created=2_000))

    listed = client.get("/api/posts")

    assert listed.status_code == 200
    data = listed.get_json()["data"]
    assert [p["id"] for p in data] == [newer.id, older.id]
    assert data[0] == {
        "id": newer.id,
        "message": "second",
        "created": 2_000,
        "userId": newer.user_id,
    }


def test_create_requires_bearer(client):
    resp = client.post("/api/posts", json={"message": "hi"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "token_missing"


def test_create_trims_and_rejects_blank(client, alice_token):
    created = client.post("/api/posts", json={"message": "  hi  "}, headers=json_headers(alice_token))
    assert created.status_code == 201
    assert created.get_json()["data"]["message"] == "hi"
    assert created.get_json()["data"]["userId"]

    blank = client.post("/api/posts", json={"message": "   "}, headers=json_headers(alice_token))
    assert blank.status_code == 400
    assert blank.get_json()["detail"] == "Message is required"

    missing = client.post("/api/posts", json={}, headers=json_headers(alice_token))
    assert missing.status_code == 400


def test_non_admin_delete_is_forbidden(client, alice_token):
    post_id = client.post(
        "/api/posts", json={"message": "keep me"}, headers=json_headers(alice_token)
    ).get_json()["data"]["id"]

    resp = client.delete(f"/api/posts/{post_id}", headers=json_headers(alice_token))
    assert resp.status_code == 403
    assert len(client.get("/api/posts").get_json()["data"]) == 1


def test_admin_delete(client, alice_token, admin_token):
    post_id = client.post(
        "/api/posts", json={"message": "spam"}, headers=json_headers(alice_token)
    ).get_json()["data"]["id"]

    resp = client.delete(f"/api/posts/{post_id}", headers=json_headers(admin_token))
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}

    again = client.delete(f"/api/posts/{post_id}", headers=json_headers(admin_token))
    assert again.status_code == 404
