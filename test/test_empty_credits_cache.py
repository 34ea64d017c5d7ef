import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.catalog.detail_cache import EmptyCreditsCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestEmptyCreditsCache(unittest.TestCase):
    def test_entry_is_fresh_until_ttl_elapses(self) -> None:
        clock = _Clock()
        cache = EmptyCreditsCache(ttl_s=600, max_size=10, clock=clock)
        cache.remember(42)
        self.assertTrue(cache.is_fresh(42))

        clock.now += 599
        self.assertTrue(cache.is_fresh(42))

        clock.now += 2
        self.assertFalse(cache.is_fresh(42))
        self.assertEqual(len(cache), 0)

    def test_lru_eviction(self) -> None:
        cache = EmptyCreditsCache(ttl_s=600, max_size=2, clock=_Clock())
        cache.remember(1)
        cache.remember(2)
        cache.remember(3)  # evict 1

        self.assertFalse(cache.is_fresh(1))
        self.assertTrue(cache.is_fresh(2))
        self.assertTrue(cache.is_fresh(3))

    def test_zero_ttl_disables_cache(self) -> None:
        cache = EmptyCreditsCache(ttl_s=0, max_size=10, clock=_Clock())
        cache.remember(1)
        self.assertFalse(cache.enabled)
        self.assertFalse(cache.is_fresh(1))


if __name__ == "__main__":
    unittest.main()
