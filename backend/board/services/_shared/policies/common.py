from collections.abc import Iterable

ADMIN_ROLE = "admin"


def has_role(roles: Iterable[str] | None, role: str) -> bool:
    """Return True if ``role`` is among ``roles`` (``None`` means no roles)."""
    return role in set(roles or ())
