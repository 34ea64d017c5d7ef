from __future__ import annotations

import itertools
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from application.ports.user_store_port import UserStorePort
from domain.accounts import TelegramProfile, User
from domain.errors import PersistenceError
from infrastructure.persistence.postgres.pool import PostgresPool

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, telegram_id, username, first_name, last_name, photo_url, created_at"


def _row_to_user(row: Any) -> User:
    return User(
        id=int(row["id"]),
        telegram_id=str(row["telegram_id"]),
        username=row["username"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        photo_url=row["photo_url"],
        created_at=row["created_at"],
    )


class InMemoryUserStore(UserStorePort):
    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._by_telegram_id: Dict[str, int] = {}
        self._next_id = itertools.count(1)

    async def get_user(self, *, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    async def get_by_telegram_id(self, *, telegram_id: str) -> Optional[User]:
        user_id = self._by_telegram_id.get(str(telegram_id))
        return self._users.get(user_id) if user_id is not None else None

    async def get_or_create(self, *, profile: TelegramProfile) -> User:
        existing = await self.get_by_telegram_id(telegram_id=profile.telegram_id)
        if existing is not None:
            return existing
        user = User(
            id=next(self._next_id),
            telegram_id=str(profile.telegram_id),
            username=profile.username,
            first_name=profile.first_name,
            last_name=profile.last_name,
            photo_url=profile.photo_url,
            created_at=datetime.now(timezone.utc),
        )
        self._users[user.id] = user
        self._by_telegram_id[user.telegram_id] = user.id
        return user

    async def close(self) -> None:
        return None


class PostgresUserStore(UserStorePort):
    """Postgres-backed accounts (asyncpg); telegram_id is unique."""

    def __init__(self, *, pool: PostgresPool) -> None:
        self._pool = pool

    async def get_user(self, *, user_id: int) -> Optional[User]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1", int(user_id))
        return _row_to_user(row) if row else None

    async def get_by_telegram_id(self, *, telegram_id: str) -> Optional[User]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM users WHERE telegram_id = $1",
                str(telegram_id),
            )
        return _row_to_user(row) if row else None

    async def get_or_create(self, *, profile: TelegramProfile) -> User:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO users (telegram_id, username, first_name, last_name, photo_url)
                VALUES ($1, $2, $3, $4, $5)
                ON CONFLICT (telegram_id) DO NOTHING
                RETURNING {_USER_COLUMNS}
                """,
                str(profile.telegram_id),
                profile.username,
                profile.first_name,
                profile.last_name,
                profile.photo_url,
            )
            if row is None:
                row = await conn.fetchrow(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE telegram_id = $1",
                    str(profile.telegram_id),
                )
        if row is None:
            raise PersistenceError("failed to resolve user after insert")
        return _row_to_user(row)

    async def close(self) -> None:
        return None
