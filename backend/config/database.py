import os
from typing import Optional


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"env var {key} expects an integer, got {raw}") from exc


def get_postgres_dsn() -> Optional[str]:
    """Service-side accessor for the Postgres DSN.

    Notes:
    - Returns None when neither POSTGRES_DSN nor POSTGRES_HOST is set; the
      server then falls back to in-memory stores (dev/tests).
    - `.env` loading is centralized in config entrypoints (settings.py), so we
      only read environment variables here.
    """

    dsn = (os.getenv("POSTGRES_DSN") or "").strip()
    if dsn:
        return dsn

    host = (os.getenv("POSTGRES_HOST") or "").strip()
    if not host:
        return None

    port = _get_env_int("POSTGRES_PORT", 5432)
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db = os.getenv("POSTGRES_DB", "streaming_app")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"
