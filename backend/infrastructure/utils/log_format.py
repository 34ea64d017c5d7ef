from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".") or "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False, default=str)
    # Quote strings so spaces/symbols stay unambiguous.
    return json.dumps(str(value), ensure_ascii=False)


def format_kv(**fields: Any) -> str:
    """Render a compact single-line key=value log string, skipping None values.

    Example:
      event="progress.upsert" user_id=3 item_id=42 completed=false
    """
    return " ".join(f"{key}={_format_value(value)}" for key, value in fields.items() if value is not None)


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    logger.log(level, "%s", format_kv(event=event, **fields), stacklevel=2)
