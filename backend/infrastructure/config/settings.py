import os
from typing import Optional

from dotenv import load_dotenv

# The project root .env is the primary dev config source and takes precedence
# over the shell environment, otherwise edits to .env silently do nothing.
load_dotenv(override=True)


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects a float, got {raw}") from exc


# ===== TMDB API =====

TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3").strip()
TMDB_API_TOKEN = os.getenv("TMDB_API_TOKEN", "").strip()
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "").strip()
TMDB_TIMEOUT_S = _get_env_float("TMDB_TIMEOUT_S", 5.0) or 5.0
# Empty means "let TMDB pick" (en-US).
TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "").strip()

# ===== Catalog mirror =====

# How long a detail lookup that returned no cast is remembered before
# re-asking upstream. 0 disables the negative cache.
DETAIL_EMPTY_CAST_TTL_S = _get_env_float("DETAIL_EMPTY_CAST_TTL_S", 600.0)
DETAIL_EMPTY_CAST_MAX_SIZE = _get_env_int("DETAIL_EMPTY_CAST_MAX_SIZE", 5000) or 5000

# ===== Video embed provider =====

EMBED_URL_TEMPLATE = (
    os.getenv("EMBED_URL_TEMPLATE", "https://vidsrc.to/embed/{media_type}/{tmdb_id}").strip()
    or "https://vidsrc.to/embed/{media_type}/{tmdb_id}"
)
