# tests/unit/services/test_auth_service.py
from __future__ import annotations

import pytest
from board.services._shared.errors import (
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    RefreshReuseOrUnknown,
    ServiceError,
)
from board.services._shared.ports import LedgerState
from board.services.auth.dto import SigninIn, SignupIn, TokenPairOut

from tests.factories import PrincipalFactory


# -------------------------------- Signup ---------------------------------- #
def test_signup_creates_principal_with_default_role(auth_service, users):
    principal = auth_service.signup(
        SignupIn(username="alice", email="Alice@Example.com", password="password123")
    )

    stored = users.find_by_username("alice")
    assert stored is not None
    assert stored.id == principal.id
    assert stored.email == "alice@example.com"
    assert stored.roles == {"user"}
    assert stored.verify_password("password123")


def test_signup_rejects_duplicates(auth_service):
    auth_service.signup(SignupIn(username="alice", email="a@example.com", password="password123"))

    with pytest.raises(ConflictError, match="Username already exists"):
        auth_service.signup(SignupIn(username="alice", email="b@example.com", password="password123"))
    with pytest.raises(ConflictError, match="Email already exists"):
        auth_service.signup(SignupIn(username="bob", email="A@example.com", password="password123"))


def test_signup_rejects_email_without_dotted_domain(auth_service, users):
    with pytest.raises(ServiceError, match="Email format looks invalid"):
        auth_service.signup(SignupIn(username="bob", email="bob@localhost", password="pw123456"))

    assert users.find_by_username("bob") is None


# -------------------------------- Signin ---------------------------------- #
def test_signin_issues_pair_and_activates_refresh(auth_service):
    auth_service.signup(SignupIn(username="alice", email="a@example.com", password="password123"))

    pair = auth_service.signin(SigninIn(username="alice", password="password123"))

    assert isinstance(pair, TokenPairOut)
    assert auth_service.ledger.store.state(pair.refresh_jti) is LedgerState.ACTIVE
    claims = auth_service.authenticate(pair.access_token)
    assert claims.username == "alice"


@pytest.mark.parametrize("username,password", [("alice", "wrong-pass"), ("nobody", "password123")])
def test_signin_invalid_credentials(auth_service, username, password):
    auth_service.signup(SignupIn(username="alice", email="a@example.com", password="password123"))

    with pytest.raises(InvalidCredentials):
        auth_service.signin(SigninIn(username=username, password=password))


# ---------------------------- Refresh / Signout ---------------------------- #
def test_refresh_rotates_and_blocks_reuse(auth_service):
    auth_service.signup(SignupIn(username="alice", email="a@example.com", password="password123"))
    pair1 = auth_service.signin(SigninIn(username="alice", password="password123"))

    pair2 = auth_service.refresh(pair1.refresh_token)
    assert pair2.refresh_jti != pair1.refresh_jti

    with pytest.raises(RefreshReuseOrUnknown):
        auth_service.refresh(pair1.refresh_token)


def test_signout_revokes_and_tolerates_garbage(auth_service):
    auth_service.signup(SignupIn(username="alice", email="a@example.com", password="password123"))
    pair = auth_service.signin(SigninIn(username="alice", password="password123"))

    assert auth_service.signout(pair.refresh_token) is True
    assert auth_service.ledger.store.state(pair.refresh_jti) is LedgerState.BLACKLISTED
    # Second signout, missing and unreadable tokens are all quiet no-ops.
    assert auth_service.signout(pair.refresh_token) is False
    assert auth_service.signout(None) is False
    assert auth_service.signout("not-a-token") is False

    with pytest.raises(RefreshReuseOrUnknown):
        auth_service.refresh(pair.refresh_token)


# --------------------------------- Whoami --------------------------------- #
def test_whoami(auth_service, users):
    alice = users.add(PrincipalFactory(username="alice"))
    assert auth_service.whoami(alice.id).username == "alice"

    with pytest.raises(NotFoundError):
        auth_service.whoami("missing")
