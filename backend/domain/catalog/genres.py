from __future__ import annotations

from typing import Any, Iterable

from domain.catalog.catalog_item import MEDIA_TV, Genre

# TMDB's genre lists are small and stable; list/search pages only carry
# `genre_ids`, so names are resolved locally instead of calling /genre/*.
MOVIE_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}


def genre_table(media_type: str) -> dict[int, str]:
    return TV_GENRES if media_type == MEDIA_TV else MOVIE_GENRES


def genres_from_ids(genre_ids: Iterable[Any], *, media_type: str) -> tuple[Genre, ...]:
    """Map upstream genre ids to (id, name) pairs, keeping order and dropping unknown ids."""
    table = genre_table(media_type)
    out: list[Genre] = []
    seen: set[int] = set()
    for raw in genre_ids or []:
        try:
            gid = int(raw)
        except (TypeError, ValueError):
            continue
        name = table.get(gid)
        if name is None or gid in seen:
            continue
        seen.add(gid)
        out.append(Genre(id=gid, name=name))
    return tuple(out)
