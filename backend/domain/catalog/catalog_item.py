from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

MEDIA_MOVIE = "movie"
MEDIA_TV = "tv"
MEDIA_TYPES = (MEDIA_MOVIE, MEDIA_TV)

# Upstream credits are trimmed to the top-billed entries before persisting.
MAX_CAST = 10


@dataclass(frozen=True)
class Genre:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class CastMember:
    id: int
    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "character": self.character,
            "profile_path": self.profile_path,
        }


@dataclass(frozen=True)
class CatalogSummary:
    """Summary fields of an upstream catalog entry, as seen in list/search pages."""

    tmdb_id: int
    title: str
    media_type: str = MEDIA_MOVIE
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    genres: tuple[Genre, ...] = ()


@dataclass(frozen=True)
class CatalogDetail:
    """Fields merged into a mirrored item by the detail backfill."""

    runtime: Optional[int] = None
    genres: tuple[Genre, ...] = ()
    cast: tuple[CastMember, ...] = ()


@dataclass(frozen=True)
class CatalogItem:
    """A locally mirrored catalog entry (movie or TV series).

    `id` is the internal surrogate id every other table references;
    `tmdb_id` is the upstream identity used for idempotent lookups.
    """

    id: int
    tmdb_id: int
    title: str
    media_type: str = MEDIA_MOVIE
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    runtime: Optional[int] = None
    genres: tuple[Genre, ...] = ()
    cast: tuple[CastMember, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def is_movie(self) -> bool:
        return self.media_type == MEDIA_MOVIE

    @property
    def needs_detail(self) -> bool:
        return not self.cast

    def with_detail(self, detail: CatalogDetail) -> "CatalogItem":
        # Keep whatever we already have when upstream omits a field.
        return replace(
            self,
            runtime=detail.runtime if detail.runtime is not None else self.runtime,
            genres=detail.genres or self.genres,
            cast=tuple(detail.cast[:MAX_CAST]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tmdb_id": self.tmdb_id,
            "title": self.title,
            "media_type": self.media_type,
            "is_movie": self.is_movie,
            "overview": self.overview,
            "poster_path": self.poster_path,
            "backdrop_path": self.backdrop_path,
            "release_date": self.release_date,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
            "runtime": self.runtime,
            "genres": [g.to_dict() for g in self.genres],
            "cast": [c.to_dict() for c in self.cast],
            "created_at": self.created_at,
        }
