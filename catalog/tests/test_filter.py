"""
Unit tests for catalog/filter.py

Tests the visibility and return-shape passes of the declaration filter.
"""

import unittest

from catalog.filter import error_or_void, exported_funcs, select_candidates
from goparse.loader import load_package_sources
from goparse.typecheck import check_package

SOURCE = b"""package demo

type T struct{}

func (t T) Method() error { return nil }

func lower() {}

func Void() {}

func Fails() error { return nil }

func Pair() (int, error) { return 0, nil }

func NamedPair() (a, b error) { return nil, nil }

func Count() int { return 0 }

func NamedErr() (err error) { return nil }

type Failure = error

func Aliased() Failure { return nil }

type Custom error

func Defined() Custom { return nil }

func Generic[T any](x T) {}
"""


class TestDeclarationFilter(unittest.TestCase):
    """Test selection of command-eligible functions."""

    def setUp(self):
        self.unit = load_package_sources({"demo.go": SOURCE})
        self.info = check_package(self.unit)

    def test_exported_funcs(self):
        """Test that methods, lower-case names and generics are excluded."""
        names = [fn.name.name for fn in exported_funcs(self.unit.decls)]
        self.assertEqual(
            names,
            ["Void", "Fails", "Pair", "NamedPair", "Count", "NamedErr", "Aliased", "Defined"],
        )

    def test_error_or_void(self):
        """Test that only void and single-error functions are kept."""
        selected = error_or_void(exported_funcs(self.unit.decls), self.info)
        self.assertEqual(
            [fn.name.name for fn in selected],
            ["Void", "Fails", "NamedErr", "Aliased"],
        )

    def test_custom_failure_type(self):
        """Test selection with a configured failure type name."""
        selected = select_candidates(self.unit, self.info, failure_type_name="demo.Custom")
        self.assertEqual([fn.name.name for fn in selected], ["Void", "Defined"])

    def test_select_candidates_keeps_order(self):
        """Test that both passes keep declaration order."""
        selected = select_candidates(self.unit, self.info)
        self.assertEqual(
            [fn.name.name for fn in selected],
            [fn.name.name for fn in error_or_void(exported_funcs(self.unit.decls), self.info)],
        )

    def test_non_function_declarations_ignored(self):
        """Test that type and var declarations are never selected."""
        unit = load_package_sources({"demo.go": b"package demo\n\ntype Exported int\n\nvar Value = 1\n"})
        self.assertEqual(exported_funcs(unit.decls), [])


if __name__ == "__main__":
    unittest.main()
