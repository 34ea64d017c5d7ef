from __future__ import annotations

from fastapi import APIRouter, Depends

from application.admin import AdminService
from server.api.rest.auth import require_admin
from server.api.rest.dependencies import get_admin_service
from server.models.schemas import BulkDeleteRequest, DeletedResponse

router = APIRouter(prefix="/api/v1/admin", tags=["admin-v1"], dependencies=[Depends(require_admin)])


@router.post("/movies/bulk-delete", response_model=DeletedResponse)
async def bulk_delete_movies(
    request: BulkDeleteRequest,
    service: AdminService = Depends(get_admin_service),
) -> DeletedResponse:
    deleted = await service.delete_items(request.ids)
    return DeletedResponse(deleted=deleted)


@router.delete("/users/{user_id}/progress", response_model=DeletedResponse)
async def reset_user_progress(
    user_id: str,
    service: AdminService = Depends(get_admin_service),
) -> DeletedResponse:
    deleted = await service.reset_user_progress(user_id)
    return DeletedResponse(deleted=deleted)
