"""
Infrastructure layer (adapters only, no business rules).

Postgres and in-memory stores, the TMDB HTTP client, the embed URL builder and
structured log helpers. Application services reach these through ports.
"""

__all__ = [
    "catalog",
    "config",
    "persistence",
    "utils",
]
