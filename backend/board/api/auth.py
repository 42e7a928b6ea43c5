"""Authentication endpoints: signup, signin, refresh rotation, signout, whoami."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from board.api.deps import (
    auth_service,
    clear_refresh_cookie,
    json_response,
    refresh_cookie,
    require_auth,
    set_refresh_cookie,
    timing,
)
from board.core.errors import TokenMissing
from board.core.extensions import get_token_service
from board.schemas import SigninSchema, SignupSchema, TokenResponseSchema, WhoAmISchema
from board.services.auth.dto import SigninIn, SignupIn, TokenPairOut

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
signin_schema = SigninSchema()
token_schema = TokenResponseSchema()
whoami_schema = WhoAmISchema()


def _token_response(pair: TokenPairOut):
    """Body carries the access token; the refresh token travels only as a cookie."""

    cfg = get_token_service().cfg
    body = {
        "data": token_schema.dump(
            {"access_token": pair.access_token, "expires_in": cfg.access_ttl_seconds}
        )
    }
    response = json_response(body)
    set_refresh_cookie(response, pair.refresh_token, max_age=cfg.refresh_ttl_seconds)
    return response


@bp.post("/signup")
@timing
def signup():
    """Create an account with the default ``user`` role."""

    data = signup_schema.load(request.get_json(silent=True) or {})
    auth_service().signup(SignupIn(**data))
    return json_response({"message": "User created successfully"}, status=201)


@bp.post("/signin")
@timing
def signin():
    """Authenticate by username/password and issue a token pair."""

    data = signin_schema.load(request.get_json(silent=True) or {})
    pair = auth_service().signin(SigninIn(**data))
    return _token_response(pair)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh cookie into a new access/refresh pair."""

    token = refresh_cookie()
    if token is None:
        current_app.logger.warning("auth.refresh.missing_cookie")
        raise TokenMissing("Refresh token required")
    pair = auth_service().refresh(token)
    return _token_response(pair)


@bp.post("/signout")
@timing
def signout():
    """Revoke the refresh cookie (if any) and clear it. Always succeeds for the client."""

    auth_service().signout(refresh_cookie())
    response = json_response({"message": "Signed out successfully"})
    clear_refresh_cookie(response)
    return response


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated principal as currently stored."""

    principal = auth_service().whoami(g.claims.subject)
    return json_response({"data": whoami_schema.dump(principal)})
