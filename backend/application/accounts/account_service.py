from __future__ import annotations

import logging

from application.ports.user_store_port import UserStorePort
from domain.accounts import TelegramProfile, User
from domain.errors import InvalidInputError, NotFoundError
from infrastructure.utils import log_event

logger = logging.getLogger(__name__)


class AccountService:
    """Telegram login handshake and account lookup.

    The Telegram payload is taken as given; first login creates the account
    and later logins return it unchanged.
    """

    def __init__(self, *, store: UserStorePort) -> None:
        self._store = store

    async def login(self, profile: TelegramProfile) -> User:
        telegram_id = str(profile.telegram_id or "").strip()
        if not telegram_id:
            raise InvalidInputError("telegram id is required", field="telegram_id")
        user = await self._store.get_or_create(
            profile=TelegramProfile(
                telegram_id=telegram_id,
                username=profile.username,
                first_name=profile.first_name,
                last_name=profile.last_name,
                photo_url=profile.photo_url,
            )
        )
        log_event(logger, "auth.login", user_id=user.id)
        return user

    async def get(self, user_id: int) -> User:
        user = await self._store.get_user(user_id=user_id)
        if user is None:
            raise NotFoundError("user not found", user_id=user_id)
        return user
