from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from domain.catalog import MEDIA_TV, CatalogItem
from infrastructure.config.settings import EMBED_URL_TEMPLATE


@dataclass(frozen=True)
class StreamLink:
    stream_url: str
    title: str
    tmdb_id: int
    media_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "stream_url": self.stream_url,
            "title": self.title,
            "tmdb_id": self.tmdb_id,
            "media_type": self.media_type,
        }


class EmbedUrlBuilder:
    """Formats the third-party player URL for a mirrored item.

    The template may use `{media_type}` ("movie" or "tv") and `{tmdb_id}`.
    """

    def __init__(self, template: str | None = None) -> None:
        self._template = (template or EMBED_URL_TEMPLATE).strip()

    def build(self, item: CatalogItem) -> StreamLink:
        kind = "tv" if item.media_type == MEDIA_TV else "movie"
        url = self._template.format(media_type=kind, tmdb_id=item.tmdb_id)
        return StreamLink(stream_url=url, title=item.title, tmdb_id=item.tmdb_id, media_type=kind)
