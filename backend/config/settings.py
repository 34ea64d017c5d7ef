import os

from dotenv import load_dotenv

# Service-side settings: focus on HTTP/runtime switches.
# Infrastructure env settings (TMDB, embed provider) live under `backend/infrastructure/config/`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """Read an integer env var, falling back to default when unset."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """Read a boolean env var (true/false/1/0/yes/no/on)."""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.lower() in {"1", "true", "y", "yes", "on"}


# ===== FastAPI / Uvicorn =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")
SERVER_WORKERS = _get_env_int("SERVER_WORKERS", 2) or 2

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== Mini-app user auth =====
#
# Login issues an HS256 token (`sub` = internal user id) when AUTH_JWT_SECRET is set.
# Behind a trusted gateway that already resolved the Telegram session, the
# internal user id can instead be injected via AUTH_USER_ID_HEADER.

AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "").strip()
_algs = os.getenv("AUTH_JWT_ALGORITHMS", "HS256").strip()
AUTH_JWT_ALGORITHMS = tuple(a.strip() for a in _algs.split(",") if a.strip()) or ("HS256",)
AUTH_JWT_TTL_S = _get_env_int("AUTH_JWT_TTL_S", 7 * 24 * 3600) or 7 * 24 * 3600
AUTH_TRUST_USER_HEADER = _get_env_bool("AUTH_TRUST_USER_HEADER", False)
AUTH_USER_ID_HEADER = os.getenv("AUTH_USER_ID_HEADER", "x-user-id").strip() or "x-user-id"

# ===== Admin panel =====

# Admin routes require "Authorization: Bearer <ADMIN_API_KEY>"; unset disables them.
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "").strip()

# ===== Catalog mirror =====

# Upstream page slices mirrored per discovery call.
CATALOG_TRENDING_LIMIT = _get_env_int("CATALOG_TRENDING_LIMIT", 20) or 20
CATALOG_POPULAR_LIMIT = _get_env_int("CATALOG_POPULAR_LIMIT", 20) or 20
CATALOG_SEARCH_LIMIT = _get_env_int("CATALOG_SEARCH_LIMIT", 10) or 10

# ===== Postgres pool =====

POSTGRES_POOL_MIN_SIZE = _get_env_int("POSTGRES_POOL_MIN_SIZE", 1) or 1
POSTGRES_POOL_MAX_SIZE = _get_env_int("POSTGRES_POOL_MAX_SIZE", 10) or 10
