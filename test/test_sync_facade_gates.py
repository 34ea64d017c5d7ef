import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.sync import SyncFacade, parse_item_id
from application.watch import Watchlist, WatchProgressTracker
from domain.catalog import CatalogSummary
from domain.errors import AuthenticationRequiredError, InvalidInputError, NotFoundError
from infrastructure.persistence.postgres.catalog_store import InMemoryCatalogStore
from infrastructure.persistence.postgres.progress_store import InMemoryProgressStore
from infrastructure.persistence.postgres.watchlist_store import InMemoryWatchlistStore


class _ExplodingStore:
    """Any store access fails the test: gates must run before storage."""

    def __getattr__(self, name):
        raise AssertionError(f"store touched: {name}")


class TestParseItemId(unittest.TestCase):
    def test_accepts_positive_ints_and_decimal_strings(self) -> None:
        self.assertEqual(parse_item_id(7), 7)
        self.assertEqual(parse_item_id("42"), 42)
        self.assertEqual(parse_item_id(" 8 "), 8)

    def test_rejects_everything_else(self) -> None:
        for bad in (0, -1, "0", "-3", "abc", "1.5", "", None, 2.0, True, [1], "\u00b2", "\u0663", "1\u00b2"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInputError):
                    parse_item_id(bad)


class TestSyncFacadeGates(unittest.IsolatedAsyncioTestCase):
    def _gated_facade(self) -> SyncFacade:
        exploding = _ExplodingStore()
        return SyncFacade(
            progress=WatchProgressTracker(store=exploding, catalog=exploding),
            watchlist=Watchlist(store=exploding, catalog=exploding),
        )

    async def test_anonymous_calls_fail_before_touching_stores(self) -> None:
        facade = self._gated_facade()
        calls = [
            facade.get_progress(user_id=None),
            facade.get_progress_for_item(user_id=None, item_id=1),
            facade.upsert_progress(user_id=None, item_id=1, current_time=1, duration=2, completed=False),
            facade.get_watchlist(user_id=None),
            facade.add_to_watchlist(user_id=None, item_id=1),
            facade.remove_from_watchlist(user_id=None, item_id=1),
            facade.check_watchlist(user_id=None, item_id=1),
        ]
        for call in calls:
            with self.assertRaises(AuthenticationRequiredError):
                await call

    async def test_auth_gate_runs_before_item_validation(self) -> None:
        facade = self._gated_facade()
        with self.assertRaises(AuthenticationRequiredError):
            await facade.add_to_watchlist(user_id=None, item_id="abc")

    async def test_malformed_item_ids_fail_before_touching_stores(self) -> None:
        facade = self._gated_facade()
        with self.assertRaises(InvalidInputError):
            await facade.check_watchlist(user_id=1, item_id="abc")
        with self.assertRaises(InvalidInputError):
            await facade.upsert_progress(user_id=1, item_id=-5, current_time=1, duration=2, completed=False)
        with self.assertRaises(InvalidInputError):
            await facade.remove_from_watchlist(user_id=1, item_id="7x")

    async def test_valid_calls_dispatch_to_services(self) -> None:
        catalog = InMemoryCatalogStore()
        item = await catalog.get_or_create(summary=CatalogSummary(tmdb_id=42, title="Answer"))
        facade = SyncFacade(
            progress=WatchProgressTracker(store=InMemoryProgressStore(catalog=catalog), catalog=catalog),
            watchlist=Watchlist(store=InMemoryWatchlistStore(catalog=catalog), catalog=catalog),
        )

        record = await facade.upsert_progress(
            user_id=1, item_id=str(item.id), current_time=120.5, duration=5400, completed=False
        )
        self.assertEqual(record.item_id, item.id)
        fetched = await facade.get_progress_for_item(user_id=1, item_id=item.id)
        self.assertEqual(fetched, record)

        await facade.add_to_watchlist(user_id=1, item_id=item.id)
        self.assertTrue(await facade.check_watchlist(user_id=1, item_id=str(item.id)))
        self.assertEqual(len(await facade.get_watchlist(user_id=1)), 1)
        self.assertEqual(len(await facade.get_progress(user_id=1)), 1)

        with self.assertRaises(NotFoundError):
            await facade.add_to_watchlist(user_id=1, item_id=item.id + 1)


if __name__ == "__main__":
    unittest.main()
