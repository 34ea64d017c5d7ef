import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))


class TestFormatKv(unittest.TestCase):
    def test_values_render_on_one_line(self) -> None:
        from infrastructure.utils import format_kv

        line = format_kv(
            event="progress.upsert",
            user_id=3,
            item_id=42,
            current_time=120.5,
            completed=False,
            skipped=None,
            at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )
        self.assertEqual(
            line,
            'event="progress.upsert" user_id=3 item_id=42 current_time=120.5 completed=false '
            "at=2024-01-02T00:00:00+00:00",
        )

    def test_log_event_emits_formatted_line(self) -> None:
        import logging

        from infrastructure.utils import log_event

        logger = logging.getLogger("test.log_event")
        with self.assertLogs(logger, level="INFO") as captured:
            log_event(logger, "watchlist.add", user_id=1, item_id=7)
        self.assertIn('event="watchlist.add" user_id=1 item_id=7', captured.output[0])


class TestPoolHelpers(unittest.TestCase):
    def test_command_count(self) -> None:
        from infrastructure.persistence.postgres.pool import command_count

        self.assertEqual(command_count("DELETE 3"), 3)
        self.assertEqual(command_count("INSERT 0 1"), 1)
        self.assertEqual(command_count(""), 0)
        self.assertEqual(command_count("BEGIN"), 0)

    def test_jsonb_loads_accepts_str_and_decoded_values(self) -> None:
        from infrastructure.persistence.postgres.pool import jsonb_dumps, jsonb_loads

        self.assertEqual(jsonb_loads('[{"id": 1}]'), [{"id": 1}])
        self.assertEqual(jsonb_loads([{"id": 1}]), [{"id": 1}])
        self.assertIsNone(jsonb_loads("{not json"))
        self.assertEqual(jsonb_dumps(["Ünïcode"]), '["Ünïcode"]')

    def test_row_mapping_with_join_prefix(self) -> None:
        from infrastructure.persistence.postgres.catalog_store import catalog_select_list, row_to_catalog_item

        row = {
            "c_id": 5,
            "c_tmdb_id": 550,
            "c_title": "Fight Club",
            "c_media_type": "movie",
            "c_overview": None,
            "c_poster_path": "/p.jpg",
            "c_backdrop_path": None,
            "c_release_date": "1999-10-15",
            "c_vote_average": 8.4,
            "c_vote_count": 10,
            "c_runtime": 139,
            "c_genres": '[{"id": 18, "name": "Drama"}]',
            "c_cast_members": [{"id": 819, "name": "Edward Norton", "character": "Narrator"}],
            "c_created_at": None,
        }
        item = row_to_catalog_item(row, prefix="c_")
        self.assertEqual(item.id, 5)
        self.assertEqual([g.name for g in item.genres], ["Drama"])
        self.assertEqual(item.cast[0].name, "Edward Norton")
        self.assertIn("c.tmdb_id AS c_tmdb_id", catalog_select_list("c"))


if __name__ == "__main__":
    unittest.main()
