from __future__ import annotations

from typing import Optional, Protocol

from domain.accounts import TelegramProfile, User


class UserStorePort(Protocol):
    async def get_user(self, *, user_id: int) -> Optional[User]:
        ...

    async def get_by_telegram_id(self, *, telegram_id: str) -> Optional[User]:
        ...

    async def get_or_create(self, *, profile: TelegramProfile) -> User:
        """First write wins: an existing account keeps its stored profile."""
        ...

    async def close(self) -> None:
        ...
