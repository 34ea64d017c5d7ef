from __future__ import annotations

from infrastructure.utils.log_format import format_kv, log_event  # noqa: F401

__all__ = [
    "format_kv",
    "log_event",
]
