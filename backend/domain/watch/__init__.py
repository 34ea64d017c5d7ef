from domain.watch.progress import (
    STATE_ABSENT,
    STATE_COMPLETED,
    STATE_IN_PROGRESS,
    WatchProgress,
    progress_state,
)
from domain.watch.watchlist_entry import WatchlistEntry

__all__ = [
    "STATE_ABSENT",
    "STATE_COMPLETED",
    "STATE_IN_PROGRESS",
    "WatchProgress",
    "WatchlistEntry",
    "progress_state",
]
