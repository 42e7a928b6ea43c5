"""Principal (user account) model stored in Redis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_ROLE = "user"


@dataclass(slots=True)
class Principal:
    """
    Authentication identity.

    Fields
    ------
    id : str
        Opaque unique identifier (uuid4 string). Used as the token subject.
    username : str
        Public handle, unique per system. Trimmed.
    email : str
        Login email, unique. Stored normalized (lowercase, trimmed).
    pass_hash : str
        Hashed password (write via :meth:`set_password`).
    roles : set[str]
        Role names; ``{"user"}`` at signup, grown by explicit grants only.
    """

    id: str
    username: str
    email: str
    pass_hash: str = ""
    roles: set[str] = field(default_factory=lambda: {DEFAULT_ROLE})

    def __post_init__(self) -> None:
        self.username = normalize_username(self.username)
        self.email = normalize_email(self.email)

    # -------------------- Construction --------------------
    @classmethod
    def new(cls, *, username: str, email: str, password: str) -> Principal:
        """
        Build a fresh principal with a random id, hashed password and default role.

        :param username: Requested handle.
        :param email: Login email.
        :param password: Plain text password to hash.
        :returns: Unsaved principal.
        """
        principal = cls(id=str(uuid4()), username=username, email=email)
        principal.set_password(password)
        return principal

    # -------------------- Password API --------------------
    def set_password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.pass_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.pass_hash:
            return False
        # ``check_password_hash`` is not typed and returns ``Any``; coerce to bool for mypy.
        return bool(check_password_hash(self.pass_hash, raw))

    # -------------------- Roles --------------------
    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role("admin")

    # -------------------- Serialization --------------------
    def to_hash(self) -> dict[str, str]:
        """Return the flat mapping persisted in ``user:{id}``."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "pass_hash": self.pass_hash,
        }

    @classmethod
    def from_hash(cls, data: dict[str, Any], roles: set[str]) -> Principal:
        """Rebuild a principal from its stored hash and role set."""
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            pass_hash=data.get("pass_hash", ""),
            roles=set(roles),
        )

    def __repr__(self) -> str:
        return f"Principal(id={self.id!r}, username={self.username!r}, roles={sorted(self.roles)!r})"


def normalize_email(value: str) -> str:
    """
    Normalize and validate email.

    :raises ValueError: If email is missing or malformed.
    """
    if not value or not isinstance(value, str):
        raise ValueError("Email is required.")
    v = value.strip().lower()
    # Minimal sanity check; full validation happens at API layer.
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Email format looks invalid.")
    return v


def normalize_username(value: str) -> str:
    """
    Normalize and validate username.

    :raises ValueError: If username is missing or only whitespace.
    """
    if not isinstance(value, str):
        raise ValueError("Username is required.")
    v = value.strip()
    if not v:
        raise ValueError("Username is required.")
    return v
