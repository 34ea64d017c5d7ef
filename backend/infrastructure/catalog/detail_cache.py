from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from infrastructure.config.settings import DETAIL_EMPTY_CAST_MAX_SIZE, DETAIL_EMPTY_CAST_TTL_S


class EmptyCreditsCache:
    """In-memory LRU+TTL set of tmdb ids whose upstream credits came back empty.

    Limitation: per-process only. Each worker re-asks upstream once per window.
    """

    def __init__(
        self,
        *,
        ttl_s: Optional[float] = None,
        max_size: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_s = float(DETAIL_EMPTY_CAST_TTL_S if ttl_s is None else ttl_s)
        self._max_size = max(int(max_size or DETAIL_EMPTY_CAST_MAX_SIZE), 1)
        self._clock = clock
        self._lock = threading.Lock()
        self._cache: OrderedDict[int, float] = OrderedDict()

    @property
    def enabled(self) -> bool:
        return self._ttl_s > 0

    def remember(self, tmdb_id: int) -> None:
        if not self.enabled:
            return
        key = int(tmdb_id)
        with self._lock:
            # Only evict when adding a new key that would exceed capacity.
            if key not in self._cache and len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
            self._cache[key] = self._clock() + self._ttl_s
            self._cache.move_to_end(key)

    def is_fresh(self, tmdb_id: int) -> bool:
        if not self.enabled:
            return False
        key = int(tmdb_id)
        with self._lock:
            expires_at = self._cache.get(key)
            if expires_at is None:
                return False
            if self._clock() >= expires_at:
                del self._cache[key]
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
