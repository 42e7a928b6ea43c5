"""Post endpoints: public listing, authenticated create, admin delete."""

from __future__ import annotations

from flask import Blueprint, request

from board.api.deps import json_response, post_service, require_auth, timing
from board.schemas import PostCreateSchema, PostSchema

bp = Blueprint("posts", __name__)

post_schema = PostSchema()
posts_schema = PostSchema(many=True)
post_create_schema = PostCreateSchema()


@bp.get("")
@timing
def list_posts():
    """Return every post, newest first."""

    return json_response({"data": posts_schema.dump(post_service().list_posts())})


@bp.post("")
@require_auth
@timing
def create_post():
    data = post_create_schema.load(request.get_json(silent=True) or {})
    post = post_service().create_post(data["message"])
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.delete("/<string:post_id>")
@require_auth
@timing
def delete_post(post_id: str):
    """Delete a post; admin only."""

    post_service().delete_post(post_id)
    return json_response({"success": True})
