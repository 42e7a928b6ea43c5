"""Factory Boy definitions for domain objects used across the suite."""

from __future__ import annotations

from .principal import PrincipalFactory, persist_principal
from .post import PostFactory

__all__ = ["PostFactory", "PrincipalFactory", "persist_principal"]
