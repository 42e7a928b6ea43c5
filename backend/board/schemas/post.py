"""Post Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class PostCreateSchema(Schema):
    """Input payload for publishing a post; trimming and length live in the service."""

    message = fields.String(required=True)


class PostSchema(Schema):
    """Public post representation."""

    id = fields.String(required=True)
    message = fields.String(required=True)
    created = fields.Integer(required=True)
    user_id = fields.String(required=True, data_key="userId")
