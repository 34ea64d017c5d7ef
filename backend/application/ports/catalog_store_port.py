from __future__ import annotations

from typing import Optional, Protocol, Sequence

from domain.catalog import CatalogDetail, CatalogItem, CatalogSummary


class CatalogStorePort(Protocol):
    """Local mirror of upstream catalog entries.

    Contract:
    - tmdb_id is unique; `get_or_create` is first-write-wins and never
      overwrites summary fields of an existing row.
    - `save_detail` is the only mutation of an existing row.
    - `delete_items` removes dependent progress/watchlist rows in the same
      transaction as the catalog rows.
    """

    async def get_item(self, *, item_id: int) -> Optional[CatalogItem]:
        ...

    async def get_or_create(self, *, summary: CatalogSummary) -> CatalogItem:
        ...

    async def save_detail(self, *, item_id: int, detail: CatalogDetail) -> Optional[CatalogItem]:
        ...

    async def delete_items(self, *, item_ids: Sequence[int]) -> int:
        ...

    async def close(self) -> None:
        ...
