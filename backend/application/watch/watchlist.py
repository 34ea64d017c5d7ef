from __future__ import annotations

from typing import List, Optional, Tuple

from application.ports.catalog_store_port import CatalogStorePort
from application.ports.user_store_port import UserStorePort
from application.ports.watchlist_store_port import WatchlistStorePort
from domain.catalog import CatalogItem
from domain.errors import NotFoundError
from domain.watch import WatchlistEntry


class Watchlist:
    """Saved-for-later items. Add and remove are both idempotent."""

    def __init__(
        self,
        *,
        store: WatchlistStorePort,
        catalog: CatalogStorePort,
        users: Optional[UserStorePort] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._users = users

    async def add(self, *, user_id: int, item_id: int) -> WatchlistEntry:
        if await self._catalog.get_item(item_id=item_id) is None:
            raise NotFoundError("movie not found", item_id=item_id)
        if self._users is not None and await self._users.get_user(user_id=user_id) is None:
            raise NotFoundError("user not found", user_id=user_id)
        return await self._store.add_entry(user_id=user_id, item_id=item_id)

    async def remove(self, *, user_id: int, item_id: int) -> None:
        await self._store.remove_entry(user_id=user_id, item_id=item_id)

    async def contains(self, *, user_id: int, item_id: int) -> bool:
        return await self._store.contains(user_id=user_id, item_id=item_id)

    async def list_for_user(self, *, user_id: int) -> List[Tuple[WatchlistEntry, CatalogItem]]:
        return await self._store.list_entries(user_id=user_id)
