from domain.catalog.catalog_item import (
    MAX_CAST,
    MEDIA_MOVIE,
    MEDIA_TV,
    MEDIA_TYPES,
    CastMember,
    CatalogDetail,
    CatalogItem,
    CatalogSummary,
    Genre,
)
from domain.catalog.genres import MOVIE_GENRES, TV_GENRES, genres_from_ids
from domain.catalog.tmdb_payload import detail_from_payload, infer_media_type, summary_from_payload

__all__ = [
    "MAX_CAST",
    "MEDIA_MOVIE",
    "MEDIA_TV",
    "MEDIA_TYPES",
    "CastMember",
    "CatalogDetail",
    "CatalogItem",
    "CatalogSummary",
    "Genre",
    "MOVIE_GENRES",
    "TV_GENRES",
    "genres_from_ids",
    "detail_from_payload",
    "infer_media_type",
    "summary_from_payload",
]
