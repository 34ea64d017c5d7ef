from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from application.sync import SyncFacade
from server.api.rest.dependencies import get_current_user_id, get_sync_facade
from server.models.schemas import (
    SuccessResponse,
    WatchlistAddRequest,
    WatchlistCheckResponse,
    WatchlistItemResponse,
    WatchlistResponse,
)

router = APIRouter(prefix="/api/v1/watchlist", tags=["watchlist-v1"])


@router.get("", response_model=WatchlistResponse)
async def list_watchlist(
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> WatchlistResponse:
    rows = await facade.get_watchlist(user_id=user_id)
    return WatchlistResponse(watchlist=[{**e.to_dict(), "movie": item.to_dict()} for e, item in rows])


@router.post("", response_model=WatchlistItemResponse)
async def add_to_watchlist(
    request: WatchlistAddRequest,
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> WatchlistItemResponse:
    entry = await facade.add_to_watchlist(user_id=user_id, item_id=request.item_id)
    return WatchlistItemResponse(item=entry.to_dict())


@router.delete("/{item_id}", response_model=SuccessResponse)
async def remove_from_watchlist(
    item_id: str,
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> SuccessResponse:
    await facade.remove_from_watchlist(user_id=user_id, item_id=item_id)
    return SuccessResponse(success=True)


@router.get("/check/{item_id}", response_model=WatchlistCheckResponse)
async def check_watchlist(
    item_id: str,
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> WatchlistCheckResponse:
    found = await facade.check_watchlist(user_id=user_id, item_id=item_id)
    return WatchlistCheckResponse(in_watchlist=found)
