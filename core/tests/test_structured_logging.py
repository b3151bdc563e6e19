"""Tests for run/phase/package logging context."""

import logging
import unittest

from core.structured_logging import (
    _RunContextFilter,
    get_run_id,
    package_scope,
    phase_scope,
    set_run_id,
)


def _context():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    _RunContextFilter().filter(record)
    return record


class TestStructuredLogging(unittest.TestCase):
    def test_set_run_id_generates_value(self) -> None:
        run_id = set_run_id()
        self.assertTrue(run_id)
        self.assertEqual(get_run_id(), run_id)
        self.assertEqual(set_run_id("fixed"), "fixed")
        self.assertEqual(get_run_id(), "fixed")

    def test_phase_scope_restores_previous(self) -> None:
        self.assertEqual(_context().phase, "-")
        with phase_scope("load"):
            self.assertEqual(_context().phase, "load")
            with phase_scope("extract"):
                self.assertEqual(_context().phase, "extract")
            self.assertEqual(_context().phase, "load")
        self.assertEqual(_context().phase, "-")

    def test_package_scope_uses_directory_name(self) -> None:
        with package_scope("/src/project/pkg/ops/"):
            self.assertEqual(_context().package, "ops")
        self.assertEqual(_context().package, "-")

    def test_filter_injects_context(self) -> None:
        set_run_id("run-1")
        with package_scope("pkg/ops"), phase_scope("select"):
            record = _context()
        self.assertEqual(record.run_id, "run-1")
        self.assertEqual(record.phase, "select")
        self.assertEqual(record.package, "ops")


if __name__ == "__main__":
    unittest.main()
