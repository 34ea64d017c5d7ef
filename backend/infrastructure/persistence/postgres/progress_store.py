from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import asyncpg

from application.ports.progress_store_port import ProgressStorePort
from domain.catalog import CatalogItem
from domain.errors import NotFoundError
from domain.watch import WatchProgress
from infrastructure.persistence.postgres.catalog_store import (
    InMemoryCatalogStore,
    catalog_select_list,
    row_to_catalog_item,
)
from infrastructure.persistence.postgres.pool import PostgresPool, command_count

logger = logging.getLogger(__name__)

_PROGRESS_COLUMNS = "id, user_id, item_id, current_time_s, duration_s, completed, last_watched"


def _row_to_progress(row: Any, *, prefix: str = "") -> WatchProgress:
    p = prefix
    return WatchProgress(
        id=int(row[f"{p}id"]),
        user_id=int(row[f"{p}user_id"]),
        item_id=int(row[f"{p}item_id"]),
        current_time=float(row[f"{p}current_time_s"] or 0.0),
        duration=float(row[f"{p}duration_s"] or 0.0),
        completed=bool(row[f"{p}completed"]),
        last_watched=row[f"{p}last_watched"],
    )


class InMemoryProgressStore(ProgressStorePort):
    """In-memory progress store for dev/tests when Postgres is not configured.

    Joins against the given in-memory catalog and registers itself so catalog
    deletes discard dependent records first.
    """

    def __init__(self, *, catalog: InMemoryCatalogStore) -> None:
        self._catalog = catalog
        self._records: Dict[Tuple[int, int], WatchProgress] = {}
        # Monotonic touch order; breaks last_watched ties on coarse clocks.
        self._touched: Dict[Tuple[int, int], int] = {}
        self._seq = itertools.count(1)
        self._next_id = itertools.count(1)
        catalog.add_dependent(self)

    def discard_items(self, item_ids: set[int]) -> int:
        keys = [k for k in self._records if k[1] in item_ids]
        for key in keys:
            self._records.pop(key, None)
            self._touched.pop(key, None)
        return len(keys)

    async def get_progress(self, *, user_id: int, item_id: int) -> Optional[WatchProgress]:
        return self._records.get((int(user_id), int(item_id)))

    async def upsert_progress(
        self,
        *,
        user_id: int,
        item_id: int,
        current_time: float,
        duration: float,
        completed: bool,
    ) -> WatchProgress:
        key = (int(user_id), int(item_id))
        existing = self._records.get(key)
        record = WatchProgress(
            id=existing.id if existing is not None else next(self._next_id),
            user_id=key[0],
            item_id=key[1],
            current_time=float(current_time),
            duration=float(duration),
            completed=bool(completed),
            last_watched=datetime.now(timezone.utc),
        )
        self._records[key] = record
        self._touched[key] = next(self._seq)
        return record

    async def list_progress(self, *, user_id: int) -> List[Tuple[WatchProgress, CatalogItem]]:
        keys = [k for k in self._records if k[0] == int(user_id)]
        keys.sort(key=lambda k: self._touched.get(k, 0), reverse=True)
        out: list[tuple[WatchProgress, CatalogItem]] = []
        for key in keys:
            item = self._catalog.lookup(key[1])
            if item is None:
                continue
            out.append((self._records[key], item))
        return out

    async def delete_for_user(self, *, user_id: int) -> int:
        keys = [k for k in self._records if k[0] == int(user_id)]
        for key in keys:
            self._records.pop(key, None)
            self._touched.pop(key, None)
        return len(keys)

    async def close(self) -> None:
        return None


class PostgresProgressStore(ProgressStorePort):
    """Postgres-backed watch progress (asyncpg).

    Relies on the unique index on watch_progress(user_id, item_id) created by
    the pool's schema bootstrap.
    """

    def __init__(self, *, pool: PostgresPool) -> None:
        self._pool = pool

    async def get_progress(self, *, user_id: int, item_id: int) -> Optional[WatchProgress]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_PROGRESS_COLUMNS} FROM watch_progress WHERE user_id = $1 AND item_id = $2",
                int(user_id),
                int(item_id),
            )
        return _row_to_progress(row) if row else None

    async def upsert_progress(
        self,
        *,
        user_id: int,
        item_id: int,
        current_time: float,
        duration: float,
        completed: bool,
    ) -> WatchProgress:
        async with self._pool.acquire() as conn:
            try:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO watch_progress (user_id, item_id, current_time_s, duration_s, completed, last_watched)
                    VALUES ($1, $2, $3, $4, $5, now())
                    ON CONFLICT (user_id, item_id)
                    DO UPDATE SET
                        current_time_s = EXCLUDED.current_time_s,
                        duration_s = EXCLUDED.duration_s,
                        completed = EXCLUDED.completed,
                        last_watched = now()
                    RETURNING {_PROGRESS_COLUMNS}
                    """,
                    int(user_id),
                    int(item_id),
                    float(current_time),
                    float(duration),
                    bool(completed),
                )
            except asyncpg.ForeignKeyViolationError as exc:
                raise NotFoundError("movie or user not found", user_id=user_id, item_id=item_id) from exc
        return _row_to_progress(row)

    async def list_progress(self, *, user_id: int) -> List[Tuple[WatchProgress, CatalogItem]]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT p.id AS p_id, p.user_id AS p_user_id, p.item_id AS p_item_id,
                       p.current_time_s AS p_current_time_s, p.duration_s AS p_duration_s,
                       p.completed AS p_completed, p.last_watched AS p_last_watched,
                       {catalog_select_list("c")}
                FROM watch_progress p
                JOIN catalog_items c ON c.id = p.item_id
                WHERE p.user_id = $1
                ORDER BY p.last_watched DESC, p.id DESC
                """,
                int(user_id),
            )
        return [(_row_to_progress(r, prefix="p_"), row_to_catalog_item(r, prefix="c_")) for r in rows]

    async def delete_for_user(self, *, user_id: int) -> int:
        async with self._pool.acquire() as conn:
            status = await conn.execute("DELETE FROM watch_progress WHERE user_id = $1", int(user_id))
        return command_count(status)

    async def close(self) -> None:
        return None
