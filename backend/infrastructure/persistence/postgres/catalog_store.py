from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, Sequence

from application.ports.catalog_store_port import CatalogStorePort
from domain.catalog import CastMember, CatalogDetail, CatalogItem, CatalogSummary, Genre
from domain.errors import PersistenceError
from infrastructure.persistence.postgres.pool import PostgresPool, command_count, jsonb_dumps, jsonb_loads

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = (
    "id, tmdb_id, title, media_type, overview, poster_path, backdrop_path, release_date, "
    "vote_average, vote_count, runtime, genres, cast_members, created_at"
)


def _genres_from_json(value: Any) -> tuple[Genre, ...]:
    out: list[Genre] = []
    for g in jsonb_loads(value) or []:
        if isinstance(g, dict) and g.get("id") is not None and g.get("name"):
            out.append(Genre(id=int(g["id"]), name=str(g["name"])))
    return tuple(out)


def _cast_from_json(value: Any) -> tuple[CastMember, ...]:
    out: list[CastMember] = []
    for c in jsonb_loads(value) or []:
        if isinstance(c, dict) and c.get("id") is not None and c.get("name"):
            out.append(
                CastMember(
                    id=int(c["id"]),
                    name=str(c["name"]),
                    character=c.get("character"),
                    profile_path=c.get("profile_path"),
                )
            )
    return tuple(out)


def row_to_catalog_item(row: Any, *, prefix: str = "") -> CatalogItem:
    """Map a catalog_items row (optionally with prefixed column aliases)."""
    p = prefix
    return CatalogItem(
        id=int(row[f"{p}id"]),
        tmdb_id=int(row[f"{p}tmdb_id"]),
        title=str(row[f"{p}title"] or ""),
        media_type=str(row[f"{p}media_type"] or "movie"),
        overview=row[f"{p}overview"],
        poster_path=row[f"{p}poster_path"],
        backdrop_path=row[f"{p}backdrop_path"],
        release_date=row[f"{p}release_date"],
        vote_average=row[f"{p}vote_average"],
        vote_count=row[f"{p}vote_count"],
        runtime=row[f"{p}runtime"],
        genres=_genres_from_json(row[f"{p}genres"]),
        cast=_cast_from_json(row[f"{p}cast_members"]),
        created_at=row[f"{p}created_at"],
    )


def catalog_select_list(alias: str, *, prefix: str = "c_") -> str:
    """`alias.col AS prefix_col, ...` for joins where column names collide."""
    cols = [c.strip() for c in CATALOG_COLUMNS.split(",")]
    return ", ".join(f"{alias}.{c} AS {prefix}{c}" for c in cols)


class ItemDependent(Protocol):
    """In-memory stores holding rows that reference catalog items."""

    def discard_items(self, item_ids: set[int]) -> int:
        ...


class InMemoryCatalogStore(CatalogStorePort):
    """In-memory catalog mirror for dev/tests when Postgres is not configured."""

    def __init__(self) -> None:
        self._items: Dict[int, CatalogItem] = {}
        self._by_tmdb_id: Dict[int, int] = {}
        self._next_id = 1
        self._dependents: list[ItemDependent] = []

    def add_dependent(self, dependent: ItemDependent) -> None:
        if dependent not in self._dependents:
            self._dependents.append(dependent)

    def lookup(self, item_id: int) -> Optional[CatalogItem]:
        """Synchronous lookup used by dependent in-memory stores for joins."""
        return self._items.get(int(item_id))

    async def get_item(self, *, item_id: int) -> Optional[CatalogItem]:
        return self._items.get(int(item_id))

    async def get_or_create(self, *, summary: CatalogSummary) -> CatalogItem:
        existing = self._by_tmdb_id.get(summary.tmdb_id)
        if existing is not None:
            return self._items[existing]
        item = CatalogItem(
            id=self._next_id,
            tmdb_id=summary.tmdb_id,
            title=summary.title,
            media_type=summary.media_type,
            overview=summary.overview,
            poster_path=summary.poster_path,
            backdrop_path=summary.backdrop_path,
            release_date=summary.release_date,
            vote_average=summary.vote_average,
            vote_count=summary.vote_count,
            genres=tuple(summary.genres),
            created_at=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._items[item.id] = item
        self._by_tmdb_id[item.tmdb_id] = item.id
        return item

    async def save_detail(self, *, item_id: int, detail: CatalogDetail) -> Optional[CatalogItem]:
        item = self._items.get(int(item_id))
        if item is None:
            return None
        merged = item.with_detail(detail)
        self._items[item.id] = merged
        return merged

    async def delete_items(self, *, item_ids: Sequence[int]) -> int:
        ids = {int(i) for i in item_ids}
        # Dependents first so no listing can observe a dangling reference.
        for dependent in self._dependents:
            dependent.discard_items(ids)
        deleted = 0
        for item_id in ids:
            item = self._items.pop(item_id, None)
            if item is None:
                continue
            self._by_tmdb_id.pop(item.tmdb_id, None)
            deleted += 1
        return deleted

    async def close(self) -> None:
        return None


class PostgresCatalogStore(CatalogStorePort):
    """Postgres-backed catalog mirror (asyncpg)."""

    def __init__(self, *, pool: PostgresPool) -> None:
        self._pool = pool

    async def get_item(self, *, item_id: int) -> Optional[CatalogItem]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {CATALOG_COLUMNS} FROM catalog_items WHERE id = $1", int(item_id))
        return row_to_catalog_item(row) if row else None

    async def get_or_create(self, *, summary: CatalogSummary) -> CatalogItem:
        # ON CONFLICT DO NOTHING keeps the first writer's summary; the follow-up
        # SELECT returns it when we lost the race (or the row already existed).
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO catalog_items (
                    tmdb_id, title, media_type, overview, poster_path, backdrop_path,
                    release_date, vote_average, vote_count, genres
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10::jsonb)
                ON CONFLICT (tmdb_id) DO NOTHING
                RETURNING {CATALOG_COLUMNS}
                """,
                summary.tmdb_id,
                summary.title,
                summary.media_type,
                summary.overview,
                summary.poster_path,
                summary.backdrop_path,
                summary.release_date,
                summary.vote_average,
                summary.vote_count,
                jsonb_dumps([g.to_dict() for g in summary.genres]),
            )
            if row is None:
                row = await conn.fetchrow(
                    f"SELECT {CATALOG_COLUMNS} FROM catalog_items WHERE tmdb_id = $1",
                    summary.tmdb_id,
                )
        if row is None:
            # Deleted between the two statements by an admin bulk delete.
            raise PersistenceError(f"catalog item tmdb_id={summary.tmdb_id} vanished during get_or_create")
        return row_to_catalog_item(row)

    async def save_detail(self, *, item_id: int, detail: CatalogDetail) -> Optional[CatalogItem]:
        genres = [g.to_dict() for g in detail.genres]
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE catalog_items
                SET runtime = COALESCE($2, runtime),
                    genres = CASE WHEN jsonb_array_length($3::jsonb) > 0 THEN $3::jsonb ELSE genres END,
                    cast_members = $4::jsonb
                WHERE id = $1
                RETURNING {CATALOG_COLUMNS}
                """,
                int(item_id),
                detail.runtime,
                jsonb_dumps(genres),
                jsonb_dumps([c.to_dict() for c in detail.cast]),
            )
        return row_to_catalog_item(row) if row else None

    async def delete_items(self, *, item_ids: Sequence[int]) -> int:
        ids = sorted({int(i) for i in item_ids})
        if not ids:
            return 0
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                progress = await conn.execute("DELETE FROM watch_progress WHERE item_id = ANY($1::int[])", ids)
                saved = await conn.execute("DELETE FROM watchlist WHERE item_id = ANY($1::int[])", ids)
                status = await conn.execute("DELETE FROM catalog_items WHERE id = ANY($1::int[])", ids)
        deleted = command_count(status)
        logger.info(
            "catalog delete: items=%s progress_rows=%s watchlist_rows=%s",
            deleted,
            command_count(progress),
            command_count(saved),
        )
        return deleted

    async def close(self) -> None:
        # The shared pool is owned and closed by the DI container.
        return None
