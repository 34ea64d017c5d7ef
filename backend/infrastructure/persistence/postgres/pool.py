from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import asyncpg

from domain.errors import PersistenceError

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id           serial PRIMARY KEY,
        telegram_id  text NOT NULL UNIQUE,
        username     text,
        first_name   text,
        last_name    text,
        photo_url    text,
        created_at   timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS catalog_items (
        id             serial PRIMARY KEY,
        tmdb_id        int NOT NULL UNIQUE,
        title          text NOT NULL,
        media_type     text NOT NULL DEFAULT 'movie' CHECK (media_type IN ('movie', 'tv')),
        overview       text,
        poster_path    text,
        backdrop_path  text,
        release_date   text,
        vote_average   double precision,
        vote_count     int,
        runtime        int,
        genres         jsonb NOT NULL DEFAULT '[]'::jsonb,
        cast_members   jsonb NOT NULL DEFAULT '[]'::jsonb,
        created_at     timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS watch_progress (
        id              serial PRIMARY KEY,
        user_id         int NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        item_id         int NOT NULL REFERENCES catalog_items(id) ON DELETE CASCADE,
        current_time_s  double precision NOT NULL DEFAULT 0,
        duration_s      double precision NOT NULL DEFAULT 0,
        completed       boolean NOT NULL DEFAULT false,
        last_watched    timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS watchlist (
        id        serial PRIMARY KEY,
        user_id   int NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        item_id   int NOT NULL REFERENCES catalog_items(id) ON DELETE CASCADE,
        added_at  timestamptz NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS watch_progress_user_recent_idx ON watch_progress(user_id, last_watched DESC);",
    "CREATE INDEX IF NOT EXISTS watchlist_user_recent_idx ON watchlist(user_id, added_at DESC);",
)

# (index name, table, keep-newest column). Tables created by older deployments
# had no pair uniqueness, so duplicates are collapsed before indexing.
_PAIR_UNIQUE_INDEXES = (
    ("watch_progress_user_item_uidx", "watch_progress", "last_watched"),
    ("watchlist_user_item_uidx", "watchlist", "added_at"),
)


def jsonb_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def jsonb_loads(value: Any) -> Any:
    """asyncpg returns jsonb as str unless a codec is registered."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def command_count(status: str) -> int:
    """Row count from an asyncpg command status such as 'DELETE 3'."""
    try:
        return int(str(status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


class PostgresPool:
    """Shared asyncpg pool for all stores, created lazily on first use.

    The schema is best-effort bootstrapped at runtime for local/dev. Production
    deployments should manage schema via migrations.
    """

    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Optional[asyncpg.Pool] = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
            )
            await self._ensure_schema(pool)
            self._pool = pool
            logger.info("PostgreSQL pool initialized")
            return self._pool

    async def _ensure_schema(self, pool: asyncpg.Pool) -> None:
        async with pool.acquire() as conn:
            for ddl in _SCHEMA:
                await conn.execute(ddl)
            for index_name, table, newest in _PAIR_UNIQUE_INDEXES:
                sql = f"CREATE UNIQUE INDEX IF NOT EXISTS {index_name} ON {table}(user_id, item_id);"
                try:
                    await conn.execute(sql)
                except asyncpg.UniqueViolationError:
                    dropped = await conn.execute(
                        f"""
                        DELETE FROM {table} a
                        USING {table} b
                        WHERE a.user_id = b.user_id
                          AND a.item_id = b.item_id
                          AND (a.{newest} < b.{newest} OR (a.{newest} = b.{newest} AND a.id < b.id));
                        """
                    )
                    logger.warning("schema: collapsed %s duplicate rows in %s", command_count(dropped), table)
                    await conn.execute(sql)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Yield a pooled connection; driver/network failures become PersistenceError."""
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                yield conn
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("postgres operation failed: %s", exc)
            raise PersistenceError(f"storage operation failed: {exc.__class__.__name__}") from exc

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL pool closed")
