"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

NOT_BLANK = validate.Regexp(r"^\s*\S", error="Must not be blank.")


class SignupSchema(Schema):
    """Input payload for account signup."""

    username = fields.String(required=True, validate=[validate.Length(min=1, max=50), NOT_BLANK])
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class SigninSchema(Schema):
    """Input payload for authenticating by username."""

    username = fields.String(required=True, validate=[validate.Length(min=1, max=50), NOT_BLANK])
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenResponseSchema(Schema):
    """Response payload containing an access token (refresh goes in a cookie)."""

    access_token = fields.String(required=True, data_key="accessToken")
    token_type = fields.String(dump_default="Bearer", data_key="tokenType")
    expires_in = fields.Integer(required=True, data_key="expiresIn")


class WhoAmISchema(Schema):
    """Identity details for the authenticated principal."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    roles = fields.Method("dump_roles")

    def dump_roles(self, obj) -> list[str]:
        return sorted(obj.roles)
