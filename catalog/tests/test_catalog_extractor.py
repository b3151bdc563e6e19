"""
Unit tests for catalog/extractor.py

Tests parameter metadata, documentation lookup and unsafe pointer handling.
"""

import unittest

from catalog.extractor import combine_comments, extract_functions
from catalog.filter import select_candidates
from goparse.loader import load_package_sources
from goparse.syntax import Comment, CommentGroup, Span
from goparse.typecheck import BasicKind, check_package


def _catalog(*sources: str, **kwargs):
    files = {f"f{i}.go": src.encode("utf-8") for i, src in enumerate(sources)}
    unit = load_package_sources(files)
    info = check_package(unit)
    return extract_functions(select_candidates(unit, info), info, unit.comments, **kwargs)


def _params(fn):
    return [(p.name, p.primitive_kind, p.is_pointer) for p in fn.parameters]


class TestConcreteScenarios(unittest.TestCase):
    """Test the basic selection and extraction scenarios."""

    def setUp(self):
        self.catalog = _catalog(
            "package demo\n"
            "\n"
            "func Foo(a, b int, path string) error { return nil }\n"
            "\n"
            "func bar(x int) {}\n"
            "\n"
            "func Baz(x int, y int) (int, error) { return x + y, nil }\n"
            "\n"
            "func Qux(p *int) { }\n"
        )

    def test_only_eligible_functions(self):
        """Test that lower-case and multi-result functions are left out."""
        self.assertEqual([fn.name for fn in self.catalog], ["Foo", "Qux"])

    def test_foo(self):
        """Test that grouped names flatten into one parameter each."""
        foo = self.catalog[0]
        self.assertTrue(foo.signals_failure)
        self.assertEqual(
            _params(foo),
            [
                ("a", BasicKind.INT, False),
                ("b", BasicKind.INT, False),
                ("path", BasicKind.STRING, False),
            ],
        )

    def test_qux(self):
        """Test that a pointer parameter reports the pointee kind."""
        qux = self.catalog[1]
        self.assertFalse(qux.signals_failure)
        self.assertEqual(_params(qux), [("p", BasicKind.INT, True)])


class TestParameterShapes(unittest.TestCase):
    """Test which parameters survive extraction."""

    def test_non_primitive_fields_dropped(self):
        """Test that composite, named and double-pointer fields are dropped."""
        (fn,) = _catalog(
            "package demo\n"
            "\n"
            "type Counter int\n"
            "\n"
            "func Mixed(xs []int, n int, m map[string]int, s string, c Counter, pp **int, rest ...int) {}\n"
        )
        self.assertEqual(
            _params(fn),
            [("n", BasicKind.INT, False), ("s", BasicKind.STRING, False)],
        )

    def test_alias_of_primitive_kept(self):
        """Test that aliases resolve to their primitive kind."""
        (fn,) = _catalog("package demo\n\ntype Label = string\n\nfunc Greet(name Label, b byte) {}\n")
        self.assertEqual(
            _params(fn),
            [("name", BasicKind.STRING, False), ("b", BasicKind.UINT8, False)],
        )

    def test_no_parameters(self):
        """Test a function without parameters."""
        (fn,) = _catalog("package demo\n\nfunc Ping() error { return nil }\n")
        self.assertEqual(fn.parameters, ())
        self.assertTrue(fn.signals_failure)


class TestUnsafePointer(unittest.TestCase):
    """Test handling of unsafe.Pointer parameters."""

    SOURCE = (
        "package demo\n"
        "\n"
        'import "unsafe"\n'
        "\n"
        "func Raw(a int, p unsafe.Pointer, b string, q unsafe.Pointer) {}\n"
    )

    def test_truncates_and_warns_once(self):
        """Test that the first unsafe pointer ends the parameter list."""
        with self.assertLogs("catalog.extractor", level="WARNING") as cm:
            (fn,) = _catalog(self.SOURCE)

        self.assertEqual(_params(fn), [("a", BasicKind.INT, False)])
        self.assertEqual(len(cm.output), 1)
        self.assertIn("'Raw'", cm.output[0])
        self.assertIn("'p'", cm.output[0])

    def test_skip_policy_drops_only_pointer_fields(self):
        """Test that the skip policy keeps the parameters after the pointer."""
        with self.assertLogs("catalog.extractor", level="WARNING") as cm:
            (fn,) = _catalog(self.SOURCE, unsafe_policy="skip")

        self.assertEqual(
            _params(fn),
            [("a", BasicKind.INT, False), ("b", BasicKind.STRING, False)],
        )
        self.assertEqual(len(cm.output), 2)

    def test_unknown_policy(self):
        """Test that an unknown policy is rejected."""
        with self.assertRaises(ValueError):
            _catalog(self.SOURCE, unsafe_policy="ignore")

    def test_renamed_import_in_one_file_only(self):
        """Test that an unsafe import alias is resolved per file."""
        with self.assertLogs("catalog.extractor", level="WARNING") as cm:
            a, b = _catalog(
                'package demo\n\nimport u "unsafe"\n\nfunc A(x int, p u.Pointer, y int) {}\n',
                'package demo\n\nimport u "example.com/u"\n\nfunc B(x int, p u.Pointer, y int) {}\n',
            )

        self.assertEqual([p.name for p in a.parameters], ["x"])
        self.assertEqual([p.name for p in b.parameters], ["x", "y"])
        self.assertEqual(len(cm.output), 1)
        self.assertIn("'A'", cm.output[0])

    def test_dot_imported_unsafe(self):
        """Test that Pointer from a dot-imported unsafe truncates too."""
        with self.assertLogs("catalog.extractor", level="WARNING") as cm:
            (fn,) = _catalog('package demo\n\nimport . "unsafe"\n\nfunc F(a int, p Pointer, b int) {}\n')

        self.assertEqual([p.name for p in fn.parameters], ["a"])
        self.assertEqual(len(cm.output), 1)


class TestDocumentation(unittest.TestCase):
    """Test documentation lookup for functions and parameters."""

    def test_function_doc_and_trailing_comment(self):
        """Test that doc and trailing comment groups are joined."""
        (fn,) = _catalog(
            "package demo\n"
            "\n"
            "// Run does work.\n"
            "// It never fails.\n"
            "func Run() {} // trailing\n"
        )
        self.assertEqual(fn.documentation, "Run does work.\nIt never fails.\n trailing\n")

    def test_name_comment_wins_over_field_comment(self):
        """Test that a comment on a name takes precedence over its field's."""
        (fn,) = _catalog(
            "package demo\n"
            "\n"
            "func Foo(\n"
            "\t// shared\n"
            "\ta, // first\n"
            "\tb int,\n"
            "\tc string,\n"
            ") {\n"
            "}\n"
        )
        docs = {p.name: p.documentation for p in fn.parameters}
        self.assertEqual(docs, {"a": "first\n", "b": "shared\n", "c": ""})
        self.assertEqual(fn.documentation, "")


class TestCombineComments(unittest.TestCase):
    """Test joining rendered comment groups."""

    def _group(self, text):
        return CommentGroup([Comment(span=Span(0, 0, 0, 0), text=text)])

    def test_empty(self):
        """Test that no groups combine to an empty string."""
        self.assertEqual(combine_comments([]), "")

    def test_joins_with_single_space(self):
        """Test that rendered groups are joined with one space."""
        groups = [self._group("// one"), self._group("/* two */")]
        self.assertEqual(combine_comments(groups), "one\n  two\n")


if __name__ == "__main__":
    unittest.main()
