from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from domain.catalog import CatalogItem
from domain.watch import WatchProgress


class ProgressStorePort(Protocol):
    """Watch progress storage: one record per (user_id, item_id).

    `upsert_progress` must be a single atomic insert-or-update keyed by the pair,
    refreshing `last_watched`; concurrent first writes may not create duplicates.
    """

    async def get_progress(self, *, user_id: int, item_id: int) -> Optional[WatchProgress]:
        ...

    async def upsert_progress(
        self,
        *,
        user_id: int,
        item_id: int,
        current_time: float,
        duration: float,
        completed: bool,
    ) -> WatchProgress:
        ...

    async def list_progress(self, *, user_id: int) -> List[Tuple[WatchProgress, CatalogItem]]:
        """Newest `last_watched` first, joined against the catalog mirror."""
        ...

    async def delete_for_user(self, *, user_id: int) -> int:
        """Administrative reset; returns the number of removed records."""
        ...

    async def close(self) -> None:
        ...
