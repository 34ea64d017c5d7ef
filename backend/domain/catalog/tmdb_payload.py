from __future__ import annotations

from typing import Any, Optional

from domain.catalog.catalog_item import (
    MAX_CAST,
    MEDIA_MOVIE,
    MEDIA_TV,
    MEDIA_TYPES,
    CastMember,
    CatalogDetail,
    CatalogSummary,
    Genre,
)
from domain.catalog.genres import genres_from_ids


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _str_or_none(value: Any) -> Optional[str]:
    s = str(value or "").strip()
    return s or None


def _float_or_none(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _int_or_none(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def infer_media_type(payload: dict[str, Any], default: Optional[str] = None) -> str:
    """Resolve movie vs tv for an upstream row.

    Priority: explicit default (the endpoint tells us), then `media_type`
    from multi/trending pages, then "has a title" (movies) vs "has a name" (tv).
    """
    if default in MEDIA_TYPES:
        return str(default)
    media_type = str(payload.get("media_type") or "").strip().lower()
    if media_type in MEDIA_TYPES:
        return media_type
    return MEDIA_MOVIE if payload.get("title") else MEDIA_TV


def summary_from_payload(payload: dict[str, Any], *, media_type: Optional[str] = None) -> Optional[CatalogSummary]:
    """Build a CatalogSummary from a TMDB list/search row; None for unusable rows."""
    if not isinstance(payload, dict):
        return None
    tmdb_id = _int_or_none(payload.get("id"))
    if tmdb_id is None or tmdb_id <= 0:
        return None
    kind = infer_media_type(payload, media_type)
    title = _str_or_none(payload.get("title")) or _str_or_none(payload.get("name"))
    if not title:
        return None
    return CatalogSummary(
        tmdb_id=tmdb_id,
        title=title,
        media_type=kind,
        overview=_str_or_none(payload.get("overview")),
        poster_path=_str_or_none(payload.get("poster_path")),
        backdrop_path=_str_or_none(payload.get("backdrop_path")),
        release_date=_str_or_none(payload.get("release_date")) or _str_or_none(payload.get("first_air_date")),
        vote_average=_float_or_none(payload.get("vote_average")),
        vote_count=_int_or_none(payload.get("vote_count")),
        genres=genres_from_ids(_as_list(payload.get("genre_ids")), media_type=kind),
    )


def _runtime(details: dict[str, Any]) -> Optional[int]:
    runtime = _int_or_none(details.get("runtime"))
    if runtime:
        return runtime
    # TV details expose per-episode runtimes instead.
    for value in _as_list(details.get("episode_run_time")):
        episode = _int_or_none(value)
        if episode:
            return episode
    return None


def _genres(details: dict[str, Any]) -> tuple[Genre, ...]:
    out: list[Genre] = []
    for g in _as_list(details.get("genres")):
        if not isinstance(g, dict):
            continue
        gid = _int_or_none(g.get("id"))
        name = _str_or_none(g.get("name"))
        if gid is None or not name:
            continue
        out.append(Genre(id=gid, name=name))
    return tuple(out)


def _cast(credits: Any) -> tuple[CastMember, ...]:
    if not isinstance(credits, dict):
        return ()
    out: list[CastMember] = []
    for c in _as_list(credits.get("cast")):
        if not isinstance(c, dict):
            continue
        pid = _int_or_none(c.get("id"))
        name = _str_or_none(c.get("name"))
        if pid is None or not name:
            continue
        out.append(
            CastMember(
                id=pid,
                name=name,
                character=_str_or_none(c.get("character")),
                profile_path=_str_or_none(c.get("profile_path")),
            )
        )
        if len(out) >= MAX_CAST:
            break
    return tuple(out)


def detail_from_payload(details: dict[str, Any], credits: Optional[dict[str, Any]] = None) -> CatalogDetail:
    """Extract runtime, full genre list and top-billed cast from a details payload.

    `credits` defaults to the `append_to_response=credits` block of `details`.
    """
    if not isinstance(details, dict):
        return CatalogDetail()
    if credits is None:
        credits = details.get("credits")
    return CatalogDetail(
        runtime=_runtime(details),
        genres=_genres(details),
        cast=_cast(credits),
    )
