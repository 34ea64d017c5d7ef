from infrastructure.catalog.detail_cache import EmptyCreditsCache
from infrastructure.catalog.embed import EmbedUrlBuilder, StreamLink
from infrastructure.catalog.tmdb_client import TMDBClient

__all__ = ["EmbedUrlBuilder", "EmptyCreditsCache", "StreamLink", "TMDBClient"]
