"""Bulletin board post model."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class Post:
    """
    Short text message published by a principal.

    :ivar id: Opaque identifier (uuid4 string).
    :ivar message: Trimmed message body.
    :ivar created: Creation time in epoch milliseconds; also the sort score.
    :ivar user_id: Author principal id.
    """

    id: str
    message: str
    created: int
    user_id: str

    @classmethod
    def new(cls, *, message: str, user_id: str) -> Post:
        return cls(
            id=str(uuid4()),
            message=message.strip(),
            created=int(time.time() * 1000),
            user_id=user_id,
        )

    def to_hash(self) -> dict[str, str]:
        return {
            "id": self.id,
            "message": self.message,
            "created": str(self.created),
            "userId": self.user_id,
        }

    @classmethod
    def from_hash(cls, data: dict[str, Any]) -> Post:
        return cls(
            id=data["id"],
            message=data["message"],
            created=int(data["created"]),
            user_id=data["userId"],
        )
