import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.catalog import CatalogMirror
from domain.errors import InvalidInputError, NotFoundError, UpstreamUnavailableError
from infrastructure.catalog import EmbedUrlBuilder, EmptyCreditsCache
from infrastructure.persistence.postgres.catalog_store import InMemoryCatalogStore


class _FakeSource:
    """Upstream catalog stand-in (no network)."""

    def __init__(
        self,
        *,
        trending=None,
        popular=None,
        search=None,
        details=None,
        error: Exception | None = None,
    ) -> None:
        self._trending = list(trending or [])
        self._popular = list(popular or [])
        self._search = list(search or [])
        self._details = dict(details or {})
        self._error = error
        self.detail_calls: list[tuple[int, str]] = []
        self.search_queries: list[str] = []
        self.closed = False

    async def trending(self):
        if self._error:
            raise self._error
        return list(self._trending)

    async def popular_movies(self):
        if self._error:
            raise self._error
        return list(self._popular)

    async def search_multi(self, *, query: str):
        self.search_queries.append(query)
        if self._error:
            raise self._error
        return list(self._search)

    async def get_details(self, *, tmdb_id: int, media_type: str):
        self.detail_calls.append((tmdb_id, media_type))
        if self._error:
            raise self._error
        payload = self._details.get(tmdb_id)
        if payload is None:
            raise NotFoundError("catalog entry not found upstream")
        return payload

    async def close(self) -> None:
        self.closed = True


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _movie(tmdb_id: int, title: str, **extra):
    return {"id": tmdb_id, "title": title, "media_type": "movie", "genre_ids": [28], **extra}


class TestCatalogMirror(unittest.IsolatedAsyncioTestCase):
    def _mirror(self, source: _FakeSource, *, clock: _Clock | None = None) -> tuple[CatalogMirror, InMemoryCatalogStore]:
        store = InMemoryCatalogStore()
        mirror = CatalogMirror(
            store=store,
            source=source,
            embed=EmbedUrlBuilder("https://vidsrc.to/embed/{media_type}/{tmdb_id}"),
            empty_credits=EmptyCreditsCache(ttl_s=600, max_size=100, clock=clock or _Clock()),
            trending_limit=20,
            popular_limit=20,
            search_limit=10,
        )
        return mirror, store

    async def test_get_or_create_is_first_write_wins(self) -> None:
        mirror, _ = self._mirror(_FakeSource())
        first = await mirror.get_or_create(tmdb_id=550, summary={"title": "Fight Club", "overview": "first"})
        second = await mirror.get_or_create(tmdb_id=550, summary={"title": "Renamed", "overview": "second"})

        self.assertEqual(first.id, second.id)
        self.assertEqual(second.title, "Fight Club")
        self.assertEqual(second.overview, "first")

    async def test_get_or_create_rejects_summary_without_title(self) -> None:
        mirror, _ = self._mirror(_FakeSource())
        with self.assertRaises(InvalidInputError):
            await mirror.get_or_create(tmdb_id=1, summary={})

    async def test_trending_mirrors_in_order_and_skips_people(self) -> None:
        source = _FakeSource(
            trending=[
                _movie(1, "One"),
                {"id": 2, "name": "A Person", "media_type": "person"},
                {"id": 3, "name": "Show", "media_type": "tv", "first_air_date": "2020-01-01"},
                {"id": None, "title": "Broken"},
            ]
        )
        mirror, store = self._mirror(source)
        items = await mirror.trending()

        self.assertEqual([i.tmdb_id for i in items], [1, 3])
        self.assertEqual(items[1].media_type, "tv")
        self.assertEqual(items[1].release_date, "2020-01-01")
        self.assertIsNone(await store.get_item(item_id=3))

    async def test_ingest_honors_limit(self) -> None:
        source = _FakeSource(popular=[_movie(i, f"M{i}") for i in range(1, 30)])
        mirror, _ = self._mirror(source)
        items = await mirror.popular()
        self.assertEqual(len(items), 20)
        self.assertTrue(all(i.is_movie for i in items))

    async def test_search_requires_query_and_caps_results(self) -> None:
        source = _FakeSource(search=[_movie(i, f"M{i}") for i in range(1, 15)])
        mirror, _ = self._mirror(source)

        with self.assertRaises(InvalidInputError):
            await mirror.search("   ")
        self.assertEqual(source.search_queries, [])

        items = await mirror.search("  matrix ")
        self.assertEqual(len(items), 10)
        self.assertEqual(source.search_queries, ["matrix"])

    async def test_get_missing_item_is_not_found(self) -> None:
        mirror, _ = self._mirror(_FakeSource())
        with self.assertRaises(NotFoundError):
            await mirror.get(999)

    async def test_detail_backfills_runtime_genres_and_cast_once(self) -> None:
        details = {
            550: {
                "runtime": 139,
                "genres": [{"id": 18, "name": "Drama"}],
                "credits": {"cast": [{"id": 819, "name": "Edward Norton", "character": "Narrator"}]},
            }
        }
        source = _FakeSource(trending=[_movie(550, "Fight Club")], details=details)
        mirror, store = self._mirror(source)
        [item] = await mirror.trending()

        enriched = await mirror.detail(item.id)
        self.assertEqual(enriched.runtime, 139)
        self.assertEqual([g.name for g in enriched.genres], ["Drama"])
        self.assertEqual(enriched.cast[0].name, "Edward Norton")

        stored = await store.get_item(item_id=item.id)
        assert stored is not None
        self.assertEqual(stored.cast, enriched.cast)

        # Cast is present now, so a second view does not call upstream.
        await mirror.detail(item.id)
        self.assertEqual(source.detail_calls, [(550, "movie")])

    async def test_empty_credits_are_negatively_cached(self) -> None:
        clock = _Clock()
        source = _FakeSource(
            trending=[{"id": 77, "name": "Quiet Show", "media_type": "tv"}],
            details={77: {"episode_run_time": [42], "credits": {"cast": []}}},
        )
        mirror, _ = self._mirror(source, clock=clock)
        [item] = await mirror.trending()

        first = await mirror.detail(item.id)
        self.assertEqual(first.runtime, 42)
        self.assertEqual(first.cast, ())
        await mirror.detail(item.id)
        self.assertEqual(len(source.detail_calls), 1)

        clock.now += 601
        await mirror.detail(item.id)
        self.assertEqual(source.detail_calls, [(77, "tv"), (77, "tv")])

    async def test_upstream_failure_propagates(self) -> None:
        mirror, _ = self._mirror(_FakeSource(error=UpstreamUnavailableError("down")))
        with self.assertRaises(UpstreamUnavailableError) as ctx:
            await mirror.trending()
        self.assertTrue(ctx.exception.retryable)

    async def test_stream_builds_embed_url_by_media_type(self) -> None:
        source = _FakeSource(
            trending=[_movie(550, "Fight Club"), {"id": 1399, "name": "GoT", "media_type": "tv"}]
        )
        mirror, _ = self._mirror(source)
        movie, show = await mirror.trending()

        link = await mirror.stream(movie.id)
        self.assertEqual(link.stream_url, "https://vidsrc.to/embed/movie/550")
        self.assertEqual(link.title, "Fight Club")
        tv_link = await mirror.stream(show.id)
        self.assertEqual(tv_link.stream_url, "https://vidsrc.to/embed/tv/1399")
        self.assertEqual(tv_link.media_type, "tv")

    async def test_close_releases_source(self) -> None:
        source = _FakeSource()
        mirror, _ = self._mirror(source)
        await mirror.close()
        self.assertTrue(source.closed)


if __name__ == "__main__":
    unittest.main()
