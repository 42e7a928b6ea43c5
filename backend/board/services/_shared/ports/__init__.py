"""
board.services._shared.ports
============================

Collection of *ports* (hexagonal interfaces) that define the contracts for
token management and refresh-token bookkeeping.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`: abstraction for signing and verifying tokens.

- :mod:`refresh_ledger_store`:
    Defines :class:`~.RefreshLedgerStore` and :class:`~.LedgerState`: the
    active/blacklist bookkeeping with atomic rotation, plus the in-memory
    double used by unit tests.

Design Notes
------------
Concrete adapters live under ``board.infra`` (PyJWT codec, Redis ledger).
"""

from __future__ import annotations

from .refresh_ledger_store import (
    InMemoryRefreshLedgerStore,
    LedgerState,
    RefreshLedgerStore,
)
from .token_provider import TokenProvider

__all__ = [
    "TokenProvider",
    "RefreshLedgerStore",
    "LedgerState",
    "InMemoryRefreshLedgerStore",
]
