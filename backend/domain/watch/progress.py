from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

STATE_ABSENT = "absent"
STATE_IN_PROGRESS = "in_progress"
STATE_COMPLETED = "completed"


@dataclass(frozen=True)
class WatchProgress:
    """Playback bookmark for one (user, item) pair.

    `completed` is asserted by the player, never derived from
    current_time/duration. current_time may exceed duration.
    """

    user_id: int
    item_id: int
    current_time: float = 0.0
    duration: float = 0.0
    completed: bool = False
    last_watched: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def state(self) -> str:
        return STATE_COMPLETED if self.completed else STATE_IN_PROGRESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "item_id": self.item_id,
            "current_time": self.current_time,
            "duration": self.duration,
            "completed": self.completed,
            "state": self.state,
            "last_watched": self.last_watched,
        }


def progress_state(progress: Optional[WatchProgress]) -> str:
    """absent -> in_progress <-> completed. Every state accepts another upsert."""
    if progress is None:
        return STATE_ABSENT
    return progress.state
