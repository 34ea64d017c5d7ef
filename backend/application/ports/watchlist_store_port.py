from __future__ import annotations

from typing import List, Protocol, Tuple

from domain.catalog import CatalogItem
from domain.watch import WatchlistEntry


class WatchlistStorePort(Protocol):
    """Per-user saved-items set, keyed by (user_id, item_id).

    Contract:
    - (user_id, item_id) is unique; `add_entry` on an existing pair returns the
      stored entry unchanged instead of inserting a duplicate.
    - `remove_entry` is idempotent.
    - `list_entries` is an inner join against the catalog mirror, newest first.
    """

    async def add_entry(self, *, user_id: int, item_id: int) -> WatchlistEntry:
        ...

    async def remove_entry(self, *, user_id: int, item_id: int) -> bool:
        ...

    async def contains(self, *, user_id: int, item_id: int) -> bool:
        ...

    async def list_entries(self, *, user_id: int) -> List[Tuple[WatchlistEntry, CatalogItem]]:
        ...

    async def close(self) -> None:
        ...
