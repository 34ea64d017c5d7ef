from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from application.sync import SyncFacade
from domain.errors import NotFoundError
from server.api.rest.dependencies import get_current_user_id, get_sync_facade
from server.models.schemas import ProgressListResponse, ProgressResponse, ProgressUpsertRequest

router = APIRouter(prefix="/api/v1/watch-progress", tags=["watch-progress-v1"])


@router.get("", response_model=ProgressListResponse)
async def list_progress(
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> ProgressListResponse:
    rows = await facade.get_progress(user_id=user_id)
    return ProgressListResponse(progress=[{**p.to_dict(), "movie": item.to_dict()} for p, item in rows])


@router.get("/{item_id}", response_model=ProgressResponse)
async def get_progress(
    item_id: str,
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> ProgressResponse:
    record = await facade.get_progress_for_item(user_id=user_id, item_id=item_id)
    if record is None:
        raise NotFoundError("no progress recorded", item_id=item_id)
    return ProgressResponse(progress=record.to_dict())


@router.post("", response_model=ProgressResponse)
async def upsert_progress(
    request: ProgressUpsertRequest,
    user_id: Optional[int] = Depends(get_current_user_id),
    facade: SyncFacade = Depends(get_sync_facade),
) -> ProgressResponse:
    record = await facade.upsert_progress(
        user_id=user_id,
        item_id=request.item_id,
        current_time=request.current_time,
        duration=request.duration,
        completed=request.completed,
    )
    return ProgressResponse(progress=record.to_dict())
