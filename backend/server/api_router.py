from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.admin as admin_v1
import server.api.rest.v1.auth as auth_v1
import server.api.rest.v1.movies as movies_v1
import server.api.rest.v1.watch_progress as watch_progress_v1
import server.api.rest.v1.watchlist as watchlist_v1
from server.models.schemas import ErrorResponse

# Failure bodies rendered by server.api.rest.errors, documented in OpenAPI.
ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (400, 401, 404, 422, 500, 503)
}

# Canonical API router aggregator (v1 only).
api_router = APIRouter(responses=ERROR_RESPONSES)
api_router.include_router(auth_v1.router)
api_router.include_router(movies_v1.router)
api_router.include_router(watch_progress_v1.router)
api_router.include_router(watchlist_v1.router)
api_router.include_router(admin_v1.router)

__all__ = ["ERROR_RESPONSES", "api_router"]
