"""
Sync façade for the mini-app's watch-state calls.

Single entry point the REST layer talks to for progress and watchlist
operations. It rejects anonymous callers and malformed item ids before any
store is touched, then dispatches to the tracker or the watchlist.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from application.watch.progress_tracker import WatchProgressTracker
from application.watch.watchlist import Watchlist
from domain.catalog import CatalogItem
from domain.errors import AuthenticationRequiredError, InvalidInputError
from domain.watch import WatchlistEntry, WatchProgress
from infrastructure.utils import log_event

logger = logging.getLogger(__name__)


def _is_decimal(text: str) -> bool:
    # str.isdigit also accepts superscripts and other non-ASCII digits int() rejects.
    return text.isascii() and text.isdigit()


def parse_item_id(value: Any, *, field: str = "item_id") -> int:
    """Accept a positive int or a decimal string; anything else is invalid input."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a positive integer", field=field)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _is_decimal(value.strip()):
        parsed = int(value.strip())
    else:
        raise InvalidInputError(f"{field} must be a positive integer", field=field)
    if parsed <= 0:
        raise InvalidInputError(f"{field} must be a positive integer", field=field)
    return parsed


def require_user(user_id: Optional[int]) -> int:
    if user_id is None:
        raise AuthenticationRequiredError("authentication required")
    return int(user_id)


class SyncFacade:
    def __init__(self, *, progress: WatchProgressTracker, watchlist: Watchlist) -> None:
        self._progress = progress
        self._watchlist = watchlist

    async def get_progress(self, *, user_id: Optional[int]) -> List[Tuple[WatchProgress, CatalogItem]]:
        uid = require_user(user_id)
        rows = await self._progress.list_for_user(user_id=uid)
        log_event(logger, "progress.list", user_id=uid, count=len(rows))
        return rows

    async def get_progress_for_item(self, *, user_id: Optional[int], item_id: Any) -> Optional[WatchProgress]:
        uid = require_user(user_id)
        iid = parse_item_id(item_id)
        record = await self._progress.get(user_id=uid, item_id=iid)
        log_event(logger, "progress.get", user_id=uid, item_id=iid, found=record is not None)
        return record

    async def upsert_progress(
        self,
        *,
        user_id: Optional[int],
        item_id: Any,
        current_time: float,
        duration: float,
        completed: bool,
    ) -> WatchProgress:
        uid = require_user(user_id)
        iid = parse_item_id(item_id)
        record = await self._progress.upsert(
            user_id=uid,
            item_id=iid,
            current_time=current_time,
            duration=duration,
            completed=completed,
        )
        log_event(
            logger,
            "progress.upsert",
            user_id=uid,
            item_id=iid,
            current_time=record.current_time,
            duration=record.duration,
            completed=record.completed,
        )
        return record

    async def get_watchlist(self, *, user_id: Optional[int]) -> List[Tuple[WatchlistEntry, CatalogItem]]:
        uid = require_user(user_id)
        rows = await self._watchlist.list_for_user(user_id=uid)
        log_event(logger, "watchlist.list", user_id=uid, count=len(rows))
        return rows

    async def add_to_watchlist(self, *, user_id: Optional[int], item_id: Any) -> WatchlistEntry:
        uid = require_user(user_id)
        iid = parse_item_id(item_id)
        entry = await self._watchlist.add(user_id=uid, item_id=iid)
        log_event(logger, "watchlist.add", user_id=uid, item_id=iid)
        return entry

    async def remove_from_watchlist(self, *, user_id: Optional[int], item_id: Any) -> None:
        uid = require_user(user_id)
        iid = parse_item_id(item_id)
        await self._watchlist.remove(user_id=uid, item_id=iid)
        log_event(logger, "watchlist.remove", user_id=uid, item_id=iid)

    async def check_watchlist(self, *, user_id: Optional[int], item_id: Any) -> bool:
        uid = require_user(user_id)
        iid = parse_item_id(item_id)
        found = await self._watchlist.contains(user_id=uid, item_id=iid)
        log_event(logger, "watchlist.check", user_id=uid, item_id=iid, in_watchlist=found)
        return found
