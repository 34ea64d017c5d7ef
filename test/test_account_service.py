import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.accounts import AccountService
from domain.accounts import TelegramProfile
from domain.errors import InvalidInputError, NotFoundError
from infrastructure.persistence.postgres.user_store import InMemoryUserStore


class TestAccountService(unittest.IsolatedAsyncioTestCase):
    async def test_login_creates_once_and_keeps_first_profile(self) -> None:
        service = AccountService(store=InMemoryUserStore())
        first = await service.login(TelegramProfile(telegram_id=" 77 ", username="ann"))
        second = await service.login(TelegramProfile(telegram_id="77", username="renamed"))

        self.assertEqual(first.id, second.id)
        self.assertEqual(second.telegram_id, "77")
        self.assertEqual(second.username, "ann")
        self.assertEqual(await service.get(first.id), first)

    async def test_blank_telegram_id_is_invalid(self) -> None:
        service = AccountService(store=InMemoryUserStore())
        with self.assertRaises(InvalidInputError):
            await service.login(TelegramProfile(telegram_id="  "))

    async def test_unknown_user_is_not_found(self) -> None:
        service = AccountService(store=InMemoryUserStore())
        with self.assertRaises(NotFoundError):
            await service.get(404)


if __name__ == "__main__":
    unittest.main()
