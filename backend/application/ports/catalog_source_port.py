from __future__ import annotations

from typing import Any, Dict, List, Protocol


class CatalogSourcePort(Protocol):
    """Read-only upstream catalog (TMDB).

    Implementations raise `UpstreamUnavailableError` when the service cannot
    be reached or answers with a server error, and `NotFoundError` when a
    detail lookup targets an id upstream does not know.
    """

    async def trending(self) -> List[Dict[str, Any]]:
        ...

    async def popular_movies(self) -> List[Dict[str, Any]]:
        ...

    async def search_multi(self, *, query: str) -> List[Dict[str, Any]]:
        ...

    async def get_details(self, *, tmdb_id: int, media_type: str) -> Dict[str, Any]:
        """Details payload with a `credits` block appended."""
        ...

    async def close(self) -> None:
        ...
