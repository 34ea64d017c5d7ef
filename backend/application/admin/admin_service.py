from __future__ import annotations

import logging
from typing import Any, Iterable

from application.ports.catalog_store_port import CatalogStorePort
from application.watch.progress_tracker import WatchProgressTracker
from application.sync.sync_facade import parse_item_id
from domain.errors import InvalidInputError
from infrastructure.utils import log_event

logger = logging.getLogger(__name__)


class AdminService:
    """Maintenance operations behind the admin panel."""

    def __init__(self, *, catalog: CatalogStorePort, progress: WatchProgressTracker) -> None:
        self._catalog = catalog
        self._progress = progress

    async def delete_items(self, item_ids: Iterable[Any]) -> int:
        """Delete catalog items with every progress and watchlist row pointing at them."""
        ids = sorted({parse_item_id(i, field="ids") for i in item_ids})
        if not ids:
            raise InvalidInputError("ids must be a non-empty list", field="ids")
        deleted = await self._catalog.delete_items(item_ids=ids)
        log_event(logger, "admin.delete_items", requested=len(ids), deleted=deleted, level=logging.WARNING)
        return deleted

    async def reset_user_progress(self, user_id: Any) -> int:
        uid = parse_item_id(user_id, field="user_id")
        deleted = await self._progress.reset_for_user(user_id=uid)
        log_event(logger, "admin.reset_progress", user_id=uid, deleted=deleted, level=logging.WARNING)
        return deleted
