from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

import asyncpg

from application.ports.watchlist_store_port import WatchlistStorePort
from domain.catalog import CatalogItem
from domain.errors import NotFoundError, PersistenceError
from domain.watch import WatchlistEntry
from infrastructure.persistence.postgres.catalog_store import (
    InMemoryCatalogStore,
    catalog_select_list,
    row_to_catalog_item,
)
from infrastructure.persistence.postgres.pool import PostgresPool, command_count

logger = logging.getLogger(__name__)


def _row_to_entry(row: Any, *, prefix: str = "") -> WatchlistEntry:
    p = prefix
    return WatchlistEntry(
        id=int(row[f"{p}id"]),
        user_id=int(row[f"{p}user_id"]),
        item_id=int(row[f"{p}item_id"]),
        added_at=row[f"{p}added_at"],
    )


class InMemoryWatchlistStore(WatchlistStorePort):
    """In-memory watchlist for dev/tests when Postgres is not configured."""

    def __init__(self, *, catalog: InMemoryCatalogStore) -> None:
        self._catalog = catalog
        self._entries: Dict[Tuple[int, int], WatchlistEntry] = {}
        self._next_id = itertools.count(1)
        catalog.add_dependent(self)

    def discard_items(self, item_ids: set[int]) -> int:
        keys = [k for k in self._entries if k[1] in item_ids]
        for key in keys:
            self._entries.pop(key, None)
        return len(keys)

    async def add_entry(self, *, user_id: int, item_id: int) -> WatchlistEntry:
        key = (int(user_id), int(item_id))
        existing = self._entries.get(key)
        if existing is not None:
            return existing
        entry = WatchlistEntry(
            id=next(self._next_id),
            user_id=key[0],
            item_id=key[1],
            added_at=datetime.now(timezone.utc),
        )
        self._entries[key] = entry
        return entry

    async def remove_entry(self, *, user_id: int, item_id: int) -> bool:
        return self._entries.pop((int(user_id), int(item_id)), None) is not None

    async def contains(self, *, user_id: int, item_id: int) -> bool:
        return (int(user_id), int(item_id)) in self._entries

    async def list_entries(self, *, user_id: int) -> List[Tuple[WatchlistEntry, CatalogItem]]:
        entries = [e for (uid, _), e in self._entries.items() if uid == int(user_id)]
        # Ids are assigned in insertion order, so they break added_at ties.
        entries.sort(key=lambda e: (e.added_at or datetime.min.replace(tzinfo=timezone.utc), e.id or 0), reverse=True)
        out: list[tuple[WatchlistEntry, CatalogItem]] = []
        for entry in entries:
            item = self._catalog.lookup(entry.item_id)
            if item is not None:
                out.append((entry, item))
        return out

    async def close(self) -> None:
        return None


class PostgresWatchlistStore(WatchlistStorePort):
    """Postgres-backed watchlist (asyncpg), unique on (user_id, item_id)."""

    def __init__(self, *, pool: PostgresPool) -> None:
        self._pool = pool

    async def add_entry(self, *, user_id: int, item_id: int) -> WatchlistEntry:
        # Insert, or return the pre-existing row on conflict. A concurrent first
        # add commits outside this statement's snapshot, so the CTE can come back
        # empty; a fresh SELECT then sees the winner's row.
        async with self._pool.acquire() as conn:
            try:
                row = await conn.fetchrow(
                    """
                    WITH ins AS (
                        INSERT INTO watchlist (user_id, item_id, added_at)
                        VALUES ($1, $2, now())
                        ON CONFLICT (user_id, item_id) DO NOTHING
                        RETURNING id, user_id, item_id, added_at
                    )
                    SELECT id, user_id, item_id, added_at FROM ins
                    UNION ALL
                    SELECT id, user_id, item_id, added_at FROM watchlist
                    WHERE user_id = $1 AND item_id = $2 AND NOT EXISTS (SELECT 1 FROM ins)
                    LIMIT 1
                    """,
                    int(user_id),
                    int(item_id),
                )
            except asyncpg.ForeignKeyViolationError as exc:
                raise NotFoundError("movie or user not found", user_id=user_id, item_id=item_id) from exc
            if row is None:
                row = await conn.fetchrow(
                    "SELECT id, user_id, item_id, added_at FROM watchlist WHERE user_id = $1 AND item_id = $2",
                    int(user_id),
                    int(item_id),
                )
        if row is None:
            # Removed between the two statements by a concurrent delete.
            raise PersistenceError(f"watchlist entry user_id={user_id} item_id={item_id} vanished during add")
        return _row_to_entry(row)

    async def remove_entry(self, *, user_id: int, item_id: int) -> bool:
        async with self._pool.acquire() as conn:
            status = await conn.execute(
                "DELETE FROM watchlist WHERE user_id = $1 AND item_id = $2",
                int(user_id),
                int(item_id),
            )
        return command_count(status) > 0

    async def contains(self, *, user_id: int, item_id: int) -> bool:
        async with self._pool.acquire() as conn:
            found = await conn.fetchval(
                "SELECT EXISTS (SELECT 1 FROM watchlist WHERE user_id = $1 AND item_id = $2)",
                int(user_id),
                int(item_id),
            )
        return bool(found)

    async def list_entries(self, *, user_id: int) -> List[Tuple[WatchlistEntry, CatalogItem]]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT w.id AS w_id, w.user_id AS w_user_id, w.item_id AS w_item_id, w.added_at AS w_added_at,
                       {catalog_select_list("c")}
                FROM watchlist w
                JOIN catalog_items c ON c.id = w.item_id
                WHERE w.user_id = $1
                ORDER BY w.added_at DESC, w.id DESC
                """,
                int(user_id),
            )
        return [(_row_to_entry(r, prefix="w_"), row_to_catalog_item(r, prefix="c_")) for r in rows]

    async def close(self) -> None:
        return None
