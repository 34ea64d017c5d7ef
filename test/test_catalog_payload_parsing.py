import sys
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from domain.catalog import (
    CatalogDetail,
    CatalogItem,
    detail_from_payload,
    genres_from_ids,
    infer_media_type,
    summary_from_payload,
)


class TestSummaryFromPayload(unittest.TestCase):
    def test_movie_row_uses_title_and_release_date(self) -> None:
        summary = summary_from_payload(
            {
                "id": 550,
                "title": "Fight Club",
                "release_date": "1999-10-15",
                "genre_ids": [18, 53],
                "vote_average": 8.4,
                "vote_count": 1000,
                "media_type": "movie",
            }
        )
        assert summary is not None
        self.assertEqual(summary.tmdb_id, 550)
        self.assertEqual(summary.title, "Fight Club")
        self.assertEqual(summary.media_type, "movie")
        self.assertEqual(summary.release_date, "1999-10-15")
        self.assertEqual([g.name for g in summary.genres], ["Drama", "Thriller"])

    def test_tv_row_falls_back_to_name_and_first_air_date(self) -> None:
        summary = summary_from_payload(
            {"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17", "genre_ids": [10759, 18]}
        )
        assert summary is not None
        self.assertEqual(summary.title, "Game of Thrones")
        self.assertEqual(summary.media_type, "tv")
        self.assertEqual(summary.release_date, "2011-04-17")
        self.assertEqual([g.name for g in summary.genres], ["Action & Adventure", "Drama"])

    def test_explicit_media_type_wins_over_payload(self) -> None:
        self.assertEqual(infer_media_type({"media_type": "tv", "name": "x"}, "movie"), "movie")
        self.assertEqual(infer_media_type({"media_type": "tv", "title": "x"}), "tv")
        self.assertEqual(infer_media_type({"title": "x"}), "movie")
        self.assertEqual(infer_media_type({"name": "x"}), "tv")

    def test_rows_without_id_or_title_are_rejected(self) -> None:
        self.assertIsNone(summary_from_payload({"title": "No id"}))
        self.assertIsNone(summary_from_payload({"id": 0, "title": "Zero"}))
        self.assertIsNone(summary_from_payload({"id": 5}))
        self.assertIsNone(summary_from_payload("not a dict"))  # type: ignore[arg-type]

    def test_unknown_genre_ids_are_dropped_and_duplicates_collapsed(self) -> None:
        genres = genres_from_ids([28, 999999, 28, "12"], media_type="movie")
        self.assertEqual([g.id for g in genres], [28, 12])


class TestDetailFromPayload(unittest.TestCase):
    def test_runtime_genres_and_cast_are_extracted(self) -> None:
        cast = [{"id": i, "name": f"Actor {i}", "character": f"C{i}", "profile_path": None} for i in range(1, 15)]
        detail = detail_from_payload(
            {
                "runtime": 139,
                "genres": [{"id": 18, "name": "Drama"}],
                "credits": {"cast": cast},
            }
        )
        self.assertEqual(detail.runtime, 139)
        self.assertEqual([g.name for g in detail.genres], ["Drama"])
        self.assertEqual(len(detail.cast), 10)
        self.assertEqual(detail.cast[0].name, "Actor 1")
        self.assertEqual(detail.cast[0].character, "C1")

    def test_tv_runtime_comes_from_first_episode_run_time(self) -> None:
        detail = detail_from_payload({"runtime": None, "episode_run_time": [0, 57, 60], "credits": {"cast": []}})
        self.assertEqual(detail.runtime, 57)
        self.assertEqual(detail.cast, ())

    def test_separate_credits_argument_is_used(self) -> None:
        detail = detail_from_payload({"runtime": 90}, {"cast": [{"id": 7, "name": "Someone"}]})
        self.assertEqual([c.id for c in detail.cast], [7])


class TestCatalogItemWithDetail(unittest.TestCase):
    def test_with_detail_keeps_existing_fields_when_upstream_omits_them(self) -> None:
        item = CatalogItem(id=1, tmdb_id=10, title="T", runtime=100, genres=genres_from_ids([18], media_type="movie"))
        merged = item.with_detail(CatalogDetail(runtime=None, genres=(), cast=()))
        self.assertEqual(merged.runtime, 100)
        self.assertEqual([g.id for g in merged.genres], [18])
        self.assertTrue(merged.needs_detail)
        self.assertEqual(merged.title, "T")


if __name__ == "__main__":
    unittest.main()
