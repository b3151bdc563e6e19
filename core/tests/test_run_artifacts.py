"""Tests for run artifact writer."""

import json
import os
import tempfile
import unittest
from pathlib import Path

from core.run_artifacts import write_catalog_report


class TestRunArtifacts(unittest.TestCase):
    def test_write_catalog_report(self) -> None:
        functions = [
            {"name": "Add", "parameters": [], "signals_failure": True, "documentation": ""},
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_catalog_report(
                functions,
                package_dir="pkg/ops",
                run_id="run-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            self.assertEqual(os.path.basename(path), "run-123.json")
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["run_id"], "run-123")
            self.assertEqual(payload["function_count"], 1)
            self.assertEqual(payload["functions"], functions)
            self.assertEqual(payload["package_dir"], os.path.abspath("pkg/ops"))
            self.assertIn("timestamp_utc", payload)

    def test_creates_missing_output_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = os.path.join(tmpdir, "nested", "reports")
            path = write_catalog_report([], package_dir=tmpdir, run_id="empty", output_dir=output_dir)
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["function_count"], 0)
            self.assertEqual(payload["functions"], [])


if __name__ == "__main__":
    unittest.main()
