"""
Catalog mirror service.

Every catalog entry handed to the mini-app is mirrored into the local store
first, so watch progress and watchlist rows can reference a stable internal
id. The upstream catalog is read-through; the mirror never refreshes summary
fields after the first write.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from application.ports.catalog_source_port import CatalogSourcePort
from application.ports.catalog_store_port import CatalogStorePort
from domain.catalog import CatalogItem, detail_from_payload, summary_from_payload
from domain.errors import InvalidInputError, NotFoundError
from infrastructure.catalog.detail_cache import EmptyCreditsCache
from infrastructure.catalog.embed import EmbedUrlBuilder, StreamLink
from infrastructure.utils import log_event

logger = logging.getLogger(__name__)


class CatalogMirror:
    """Local mirror of the upstream catalog.

    Attributes:
        _store: persistence for mirrored items
        _source: upstream catalog (TMDB)
        _embed: stream URL builder
        _empty_credits: negative cache for detail lookups without cast
    """

    def __init__(
        self,
        *,
        store: CatalogStorePort,
        source: CatalogSourcePort,
        embed: Optional[EmbedUrlBuilder] = None,
        empty_credits: Optional[EmptyCreditsCache] = None,
        trending_limit: int = 20,
        popular_limit: int = 20,
        search_limit: int = 10,
    ) -> None:
        self._store = store
        self._source = source
        self._embed = embed or EmbedUrlBuilder()
        self._empty_credits = empty_credits if empty_credits is not None else EmptyCreditsCache()
        self._trending_limit = trending_limit
        self._popular_limit = popular_limit
        self._search_limit = search_limit

    async def get_or_create(
        self,
        *,
        tmdb_id: int,
        summary: dict[str, Any],
        media_type: Optional[str] = None,
    ) -> CatalogItem:
        """Return the mirrored item for `tmdb_id`, inserting it from `summary` if absent.

        The first writer's summary wins; later payloads never overwrite it.
        """
        payload = dict(summary or {})
        payload["id"] = tmdb_id
        parsed = summary_from_payload(payload, media_type=media_type)
        if parsed is None:
            raise InvalidInputError("catalog summary needs a positive id and a title", tmdb_id=tmdb_id)
        return await self._store.get_or_create(summary=parsed)

    async def ingest(
        self,
        results: Iterable[dict[str, Any]],
        *,
        media_type: Optional[str] = None,
        limit: int = 20,
    ) -> List[CatalogItem]:
        """Mirror an upstream result page, in order, skipping people and unusable rows."""
        items: list[CatalogItem] = []
        skipped = 0
        for row in results:
            if len(items) >= limit:
                break
            if not isinstance(row, dict) or row.get("media_type") == "person":
                skipped += 1
                continue
            parsed = summary_from_payload(row, media_type=media_type)
            if parsed is None:
                skipped += 1
                continue
            items.append(await self._store.get_or_create(summary=parsed))
        if skipped:
            logger.debug("catalog ingest skipped=%s kept=%s", skipped, len(items))
        return items

    async def trending(self) -> List[CatalogItem]:
        results = await self._source.trending()
        return await self.ingest(results, limit=self._trending_limit)

    async def popular(self) -> List[CatalogItem]:
        results = await self._source.popular_movies()
        return await self.ingest(results, media_type="movie", limit=self._popular_limit)

    async def search(self, query: str) -> List[CatalogItem]:
        q = str(query or "").strip()
        if not q:
            raise InvalidInputError("query parameter is required", field="q")
        results = await self._source.search_multi(query=q)
        items = await self.ingest(results, limit=self._search_limit)
        log_event(logger, "catalog_search", query_len=len(q), upstream=len(results), results=len(items))
        return items

    async def get(self, item_id: int) -> CatalogItem:
        item = await self._store.get_item(item_id=item_id)
        if item is None:
            raise NotFoundError("movie not found", item_id=item_id)
        return item

    async def detail(self, item_id: int) -> CatalogItem:
        item = await self.get(item_id)
        if item.needs_detail:
            item = await self.enrich_detail(item)
        return item

    async def enrich_detail(self, item: CatalogItem) -> CatalogItem:
        """Backfill runtime, genres and top-billed cast from upstream details."""
        if self._empty_credits.is_fresh(item.tmdb_id):
            return item
        payload = await self._source.get_details(tmdb_id=item.tmdb_id, media_type=item.media_type)
        detail = detail_from_payload(payload)
        if not detail.cast:
            self._empty_credits.remember(item.tmdb_id)
            log_event(logger, "catalog_detail_empty_cast", item_id=item.id, tmdb_id=item.tmdb_id)
            if detail.runtime is None and not detail.genres:
                return item
        saved = await self._store.save_detail(item_id=item.id, detail=detail)
        # Deleted concurrently by an admin; serve what we fetched.
        return saved if saved is not None else item.with_detail(detail)

    async def stream(self, item_id: int) -> StreamLink:
        item = await self.get(item_id)
        return self._embed.build(item)

    async def close(self) -> None:
        await self._source.close()
