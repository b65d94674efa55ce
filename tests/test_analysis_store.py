import dataclasses
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis import analyze_ats  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.errors import StorageError  # noqa: E402
from app.storage import analysis_store  # noqa: E402

RESUME = (
    "John Doe john@example.com (555) 123-4567 Education: BS Computer Science. "
    "Experience: Developed software at Acme for 3 years, improved performance by 20%. "
    "Skills: Python, SQL."
)
JOB = "Looking for a Python developer with SQL and AWS experience."


class AnalysisStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        tmp_settings = dataclasses.replace(settings, analysis_db_path=str(Path(self._tmp.name) / "analyses.db"))
        patcher = patch.object(analysis_store, "settings", tmp_settings)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.result = analyze_ats(RESUME, JOB)

    def _save(self, original_name: str):
        return analysis_store.save_analysis(
            filename=f"{original_name}-stored.txt",
            original_name=original_name,
            resume_text=RESUME,
            job_description=JOB,
            result=self.result,
        )

    def test_save_and_fetch_round_trip(self):
        saved = self._save("resume.txt")
        fetched = analysis_store.get_analysis(saved.id)

        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.id, saved.id)
        self.assertEqual(fetched.original_name, "resume.txt")
        self.assertEqual(fetched.resume_text, RESUME)
        self.assertEqual(fetched.job_description, JOB)
        self.assertEqual(fetched.ats_score, self.result.ats_score)
        self.assertEqual(fetched.keyword_analysis, self.result.keyword_analysis)
        self.assertEqual(fetched.formatting_analysis, self.result.formatting_analysis)
        self.assertEqual(fetched.improvement_tips, self.result.improvement_tips)
        self.assertEqual(fetched.created_at, saved.created_at)

    def test_history_is_newest_first_and_limited(self):
        stamps = [datetime(2024, 1, day, tzinfo=timezone.utc) for day in (1, 2, 3)]
        with patch.object(analysis_store, "_utc_now", side_effect=stamps):
            first = self._save("first.pdf")
            second = self._save("second.pdf")
            third = self._save("third.pdf")

        history = analysis_store.list_history(limit=2)
        self.assertEqual([item.id for item in history], [third.id, second.id])
        self.assertEqual(history[0].original_name, "third.pdf")
        self.assertEqual(history[0].ats_score, self.result.ats_score)
        self.assertNotIn(first.id, [item.id for item in history])

    def test_unknown_id_returns_none(self):
        self.assertIsNone(analysis_store.get_analysis("does-not-exist"))

    def test_clear_analyses(self):
        self._save("resume.txt")
        analysis_store.clear_analyses()
        self.assertEqual(analysis_store.list_history(), [])

    def test_unusable_database_path_raises_storage_error(self):
        broken = dataclasses.replace(settings, analysis_db_path=self._tmp.name)
        with patch.object(analysis_store, "settings", broken):
            with self.assertRaises(StorageError):
                analysis_store.list_history()


if __name__ == "__main__":
    unittest.main()
