import os
import time
import unittest
from datetime import datetime, timedelta, timezone

from src.sanitization.domain.errors import FetchFailedError
from src.sanitization.infrastructure.rules_cache import RulesFileCache
from tests.utils.tempdir import managed_temp_dir


class RulesFileCacheTests(unittest.TestCase):
    def test_missing_file_is_stale(self):
        with managed_temp_dir("rules_cache_missing") as tmp:
            cache = RulesFileCache(tmp / "rules.json")
            self.assertFalse(cache.exists())
            self.assertIsNone(cache.last_modified())
            self.assertTrue(cache.is_stale(timedelta(hours=24)))

    def test_write_then_read_verbatim(self):
        with managed_temp_dir("rules_cache_write") as tmp:
            cache = RulesFileCache(tmp / "nested" / "rules.json")
            document = '{"providers": {"p": {"urlPattern": "ÅMÅŽ"}}}'
            path = cache.write_text(document)
            self.assertEqual(path, tmp / "nested" / "rules.json")
            self.assertEqual(cache.read_text(), document)
            self.assertFalse(cache.is_stale(timedelta(hours=24)))
            self.assertEqual(sorted(p.name for p in path.parent.iterdir()), ["rules.json"])

    def test_line_endings_are_kept(self):
        with managed_temp_dir("rules_cache_newlines") as tmp:
            cache = RulesFileCache(tmp / "rules.json")
            document = "{\r\n  \"providers\": {}\r\n}\n"
            cache.write_text(document)
            self.assertEqual(cache.path.read_bytes(), document.encode("utf-8"))
            self.assertEqual(cache.read_text(), document)

    def test_staleness_uses_file_mtime(self):
        with managed_temp_dir("rules_cache_mtime") as tmp:
            cache = RulesFileCache(tmp / "rules.json")
            cache.write_text("{}")
            old = time.time() - 25 * 3600
            os.utime(cache.path, (old, old))
            self.assertTrue(cache.is_stale(timedelta(hours=24)))
            self.assertFalse(cache.is_stale(timedelta(hours=26)))

    def test_staleness_relative_to_given_now(self):
        with managed_temp_dir("rules_cache_now") as tmp:
            cache = RulesFileCache(tmp / "rules.json")
            cache.write_text("{}")
            later = datetime.now(timezone.utc) + timedelta(hours=25)
            self.assertTrue(cache.is_stale(timedelta(hours=24), now=later))

    def test_write_failure_raises_fetch_failed(self):
        with managed_temp_dir("rules_cache_fail") as tmp:
            blocker = tmp / "blocker"
            blocker.write_text("file, not a directory", encoding="utf-8")
            cache = RulesFileCache(blocker / "rules.json")
            with self.assertRaises(FetchFailedError):
                cache.write_text("{}")
