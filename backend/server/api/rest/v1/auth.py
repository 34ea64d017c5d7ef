from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from application.accounts import AccountService
from application.sync import require_user
from domain.accounts import TelegramProfile
from server.api.rest.auth import issue_token
from server.api.rest.dependencies import get_account_service, get_current_user_id
from server.models.schemas import LoginResponse, TelegramLoginRequest, UserResponse

router = APIRouter(prefix="/api/v1/auth", tags=["auth-v1"])


@router.post("/telegram", response_model=LoginResponse)
async def telegram_login(
    request: TelegramLoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    user = await service.login(
        TelegramProfile(
            telegram_id=str(request.telegram_id),
            username=request.username,
            first_name=request.first_name,
            last_name=request.last_name,
            photo_url=request.photo_url,
        )
    )
    return LoginResponse(user=user.to_dict(), token=issue_token(user.id))


@router.get("/me", response_model=UserResponse)
async def me(
    user_id: Optional[int] = Depends(get_current_user_id),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    user = await service.get(require_user(user_id))
    return UserResponse(user=user.to_dict())
