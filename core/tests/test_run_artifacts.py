"""Tests for run artifact writer."""

import json
import tempfile
import unittest
from pathlib import Path

from core.run_artifacts import build_batch_report, write_run_report


class TestRunArtifacts(unittest.TestCase):
    def test_build_batch_report(self) -> None:
        report = build_batch_report("style", {"files_extracted": 2}, ["b.css", "a.css"])
        self.assertEqual(report["phase"], "style")
        self.assertEqual(report["stats"], {"files_extracted": 2})
        self.assertEqual(report["omitted_paths"], ["a.css", "b.css"])
        self.assertIn("timestamp_utc", report)

    def test_write_run_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_run_report(
                report={"phase": "script", "value": 1},
                batch_id="batch-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            self.assertEqual(Path(path).name, "batch-123.json")
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["batch_id"], "batch-123")
            self.assertEqual(payload["phase"], "script")
            self.assertEqual(payload["value"], 1)


if __name__ == "__main__":
    unittest.main()
