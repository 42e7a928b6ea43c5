"""Marshmallow schemas for request parsing and response shaping."""

from __future__ import annotations

from .auth import SigninSchema, SignupSchema, TokenResponseSchema, WhoAmISchema
from .post import PostCreateSchema, PostSchema

__all__ = [
    "PostCreateSchema",
    "PostSchema",
    "SigninSchema",
    "SignupSchema",
    "TokenResponseSchema",
    "WhoAmISchema",
]
