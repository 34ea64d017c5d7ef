from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from application.accounts import AccountService
from application.admin import AdminService
from application.catalog import CatalogMirror
from application.sync import SyncFacade
from application.watch import Watchlist, WatchProgressTracker
from config.settings import (
    CATALOG_POPULAR_LIMIT,
    CATALOG_SEARCH_LIMIT,
    CATALOG_TRENDING_LIMIT,
    POSTGRES_POOL_MAX_SIZE,
    POSTGRES_POOL_MIN_SIZE,
)
from server.api.rest.auth import get_current_user_id

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _build_pool():
    from config.database import get_postgres_dsn
    from infrastructure.persistence.postgres.pool import PostgresPool

    dsn = get_postgres_dsn()
    if not dsn:
        logger.warning("POSTGRES_DSN not configured; using in-memory stores")
        return None
    return PostgresPool(dsn=dsn, min_size=POSTGRES_POOL_MIN_SIZE, max_size=POSTGRES_POOL_MAX_SIZE)


@lru_cache(maxsize=1)
def _build_catalog_store():
    from infrastructure.persistence.postgres.catalog_store import (
        InMemoryCatalogStore,
        PostgresCatalogStore,
    )

    pool = _build_pool()
    if pool is not None:
        return PostgresCatalogStore(pool=pool)
    return InMemoryCatalogStore()


@lru_cache(maxsize=1)
def _build_progress_store():
    from infrastructure.persistence.postgres.progress_store import (
        InMemoryProgressStore,
        PostgresProgressStore,
    )

    pool = _build_pool()
    if pool is not None:
        return PostgresProgressStore(pool=pool)
    return InMemoryProgressStore(catalog=_build_catalog_store())


@lru_cache(maxsize=1)
def _build_watchlist_store():
    from infrastructure.persistence.postgres.watchlist_store import (
        InMemoryWatchlistStore,
        PostgresWatchlistStore,
    )

    pool = _build_pool()
    if pool is not None:
        return PostgresWatchlistStore(pool=pool)
    return InMemoryWatchlistStore(catalog=_build_catalog_store())


@lru_cache(maxsize=1)
def _build_user_store():
    from infrastructure.persistence.postgres.user_store import InMemoryUserStore, PostgresUserStore

    pool = _build_pool()
    if pool is not None:
        return PostgresUserStore(pool=pool)
    return InMemoryUserStore()


@lru_cache(maxsize=1)
def _build_catalog_mirror() -> CatalogMirror:
    from infrastructure.catalog import EmbedUrlBuilder, EmptyCreditsCache, TMDBClient

    return CatalogMirror(
        store=_build_catalog_store(),
        source=TMDBClient(),
        embed=EmbedUrlBuilder(),
        empty_credits=EmptyCreditsCache(),
        trending_limit=CATALOG_TRENDING_LIMIT,
        popular_limit=CATALOG_POPULAR_LIMIT,
        search_limit=CATALOG_SEARCH_LIMIT,
    )


@lru_cache(maxsize=1)
def _build_progress_tracker() -> WatchProgressTracker:
    return WatchProgressTracker(
        store=_build_progress_store(),
        catalog=_build_catalog_store(),
        users=_build_user_store(),
    )


@lru_cache(maxsize=1)
def _build_watchlist() -> Watchlist:
    return Watchlist(
        store=_build_watchlist_store(),
        catalog=_build_catalog_store(),
        users=_build_user_store(),
    )


@lru_cache(maxsize=1)
def _build_sync_facade() -> SyncFacade:
    return SyncFacade(progress=_build_progress_tracker(), watchlist=_build_watchlist())


@lru_cache(maxsize=1)
def _build_account_service() -> AccountService:
    return AccountService(store=_build_user_store())


@lru_cache(maxsize=1)
def _build_admin_service() -> AdminService:
    return AdminService(catalog=_build_catalog_store(), progress=_build_progress_tracker())


def get_catalog_mirror() -> CatalogMirror:
    return _build_catalog_mirror()


def get_sync_facade() -> SyncFacade:
    return _build_sync_facade()


def get_account_service() -> AccountService:
    return _build_account_service()


def get_admin_service() -> AdminService:
    return _build_admin_service()


async def _close(resource: Optional[Any]) -> None:
    close = getattr(resource, "close", None)
    if callable(close):
        await close()


async def shutdown_dependencies() -> None:
    """Shutdown hooks for long-lived adapters (HTTP session, connection pool)."""
    if _build_catalog_mirror.cache_info().currsize:
        await _close(_build_catalog_mirror())
    for builder in (_build_catalog_store, _build_progress_store, _build_watchlist_store, _build_user_store):
        if builder.cache_info().currsize:
            await _close(builder())
    if _build_pool.cache_info().currsize:
        await _close(_build_pool())


__all__ = [
    "get_account_service",
    "get_admin_service",
    "get_catalog_mirror",
    "get_current_user_id",
    "get_sync_facade",
    "shutdown_dependencies",
]
