from application.watch.progress_tracker import WatchProgressTracker
from application.watch.watchlist import Watchlist

__all__ = ["WatchProgressTracker", "Watchlist"]
