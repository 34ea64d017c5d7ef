from __future__ import annotations

import math
from typing import List, Optional, Tuple

from application.ports.catalog_store_port import CatalogStorePort
from application.ports.progress_store_port import ProgressStorePort
from application.ports.user_store_port import UserStorePort
from domain.catalog import CatalogItem
from domain.errors import InvalidInputError, NotFoundError
from domain.watch import WatchProgress


def _seconds(name: str, value: float) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number", field=name) from exc
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        raise InvalidInputError(f"{name} must be a finite number >= 0", field=name)
    return seconds


class WatchProgressTracker:
    """Per-user playback bookmarks, at most one per (user, item)."""

    def __init__(
        self,
        *,
        store: ProgressStorePort,
        catalog: CatalogStorePort,
        users: Optional[UserStorePort] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        # Without a user store, callers are trusted to pass existing accounts.
        self._users = users

    async def get(self, *, user_id: int, item_id: int) -> Optional[WatchProgress]:
        return await self._store.get_progress(user_id=user_id, item_id=item_id)

    async def upsert(
        self,
        *,
        user_id: int,
        item_id: int,
        current_time: float,
        duration: float,
        completed: bool,
    ) -> WatchProgress:
        """Create or overwrite the bookmark and refresh last_watched.

        Any state may follow any other: a completed item goes back to
        in-progress when the player reports completed=False.
        """
        current = _seconds("current_time", current_time)
        total = _seconds("duration", duration)
        if await self._catalog.get_item(item_id=item_id) is None:
            raise NotFoundError("movie not found", item_id=item_id)
        if self._users is not None and await self._users.get_user(user_id=user_id) is None:
            raise NotFoundError("user not found", user_id=user_id)
        return await self._store.upsert_progress(
            user_id=user_id,
            item_id=item_id,
            current_time=current,
            duration=total,
            completed=bool(completed),
        )

    async def list_for_user(self, *, user_id: int) -> List[Tuple[WatchProgress, CatalogItem]]:
        return await self._store.list_progress(user_id=user_id)

    async def reset_for_user(self, *, user_id: int) -> int:
        return await self._store.delete_for_user(user_id=user_id)
