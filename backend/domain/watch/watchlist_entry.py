from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class WatchlistEntry:
    """A user-scoped "saved for later" membership, keyed by (user_id, item_id)."""

    user_id: int
    item_id: int
    added_at: Optional[datetime] = None
    id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "item_id": self.item_id,
            "added_at": self.added_at,
        }
