"""Service layer public API.

Re-exports
----------
- Base primitives (from ``board.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

Concrete services are imported from their subpackages
(:mod:`board.services.auth.service`, :mod:`board.services.posts`) to keep the
port modules free of import cycles.
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext

__all__ = ["BaseService", "ServiceContext"]
