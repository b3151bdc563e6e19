"""
Unit tests for goparse/builder.py

Tests conversion of tree-sitter trees into the syntax model.
"""

import unittest

from goparse.builder import build_source_file
from goparse.parser import parse_bytes
from goparse.syntax import FuncDecl, GenDecl, ImportSpec, TypeSpec, walk


def _build(source: str):
    data = source.encode("utf-8")
    return build_source_file(parse_bytes(data), data, "demo.go")


class TestBuildSourceFile(unittest.TestCase):
    """Test top-level structure."""

    def test_package_and_declarations(self):
        source_file = _build(
            'package demo\n\nimport "errors"\n\ntype T struct{}\n\nvar x = 1\n\n'
            "func F() {}\n\nfunc (t *T) M() {}\n"
        )

        self.assertEqual(source_file.package_name.name, "demo")
        self.assertEqual(
            [type(d).__name__ for d in source_file.decls],
            ["GenDecl", "GenDecl", "GenDecl", "FuncDecl", "FuncDecl"],
        )
        self.assertEqual([d.token for d in source_file.decls[:3]], ["import", "type", "var"])
        self.assertEqual([s.path for s in source_file.imports], ["errors"])

    def test_missing_package_clause(self):
        with self.assertRaises(ValueError):
            _build("func F() {}\n")


class TestBuildFunction(unittest.TestCase):
    """Test function and method signatures."""

    def test_parameters_and_results(self):
        source_file = _build("package demo\n\nfunc F(a, b int, p *string, rest ...byte) (n int, err error) { return }\n")
        fn = source_file.decls[0]

        self.assertIsInstance(fn, FuncDecl)
        self.assertFalse(fn.is_method)
        self.assertEqual([[n.name for n in f.names] for f in fn.params.fields], [["a", "b"], ["p"], ["rest"]])
        self.assertEqual([f.type.kind for f in fn.params.fields], ["name", "pointer", "ellipsis"])
        self.assertTrue(fn.params.fields[2].variadic)
        self.assertEqual(fn.params.fields[2].type.text, "...byte")
        self.assertEqual(fn.params.num_fields(), 4)
        self.assertEqual(fn.num_results(), 2)

    def test_bare_result(self):
        fn = _build("package demo\n\nfunc F() error { return nil }\n").decls[0]

        self.assertEqual(fn.num_results(), 1)
        self.assertEqual(fn.result_fields()[0].names, [])
        self.assertEqual(fn.result_fields()[0].type.name, "error")

    def test_method_and_generic(self):
        source_file = _build(
            "package demo\n\ntype T struct{}\n\nfunc (t T) M() {}\n\nfunc G[K comparable, V any](m map[K]V) {}\n"
        )
        method, generic = source_file.decls[1], source_file.decls[2]

        self.assertTrue(method.is_method)
        self.assertTrue(generic.is_generic)
        self.assertEqual(generic.params.fields[0].type.kind, "map")
        self.assertEqual(
            [f.type.kind for f in generic.type_params.fields], ["constraint", "constraint"]
        )

    def test_qualified_type(self):
        fn = _build('package demo\n\nimport "unsafe"\n\nfunc F(p unsafe.Pointer) {}\n').decls[1]
        expr = fn.params.fields[0].type

        self.assertEqual(expr.kind, "qualified")
        self.assertEqual((expr.package, expr.name), ("unsafe", "Pointer"))


class TestBuildGenDecl(unittest.TestCase):
    """Test import and type declarations."""

    def test_import_names(self):
        source_file = _build('package demo\n\nimport (\n\t"fmt"\n\tj "encoding/json"\n\t_ "embed"\n)\n')
        specs = source_file.decls[0].specs

        self.assertTrue(all(isinstance(s, ImportSpec) for s in specs))
        self.assertEqual([s.key() for s in specs], [(None, "fmt"), ("j", "encoding/json"), ("_", "embed")])

    def test_type_specs(self):
        decl = _build("package demo\n\ntype (\n\tA = string\n\tB int\n\tC[T any] []T\n)\n").decls[0]

        self.assertIsInstance(decl, GenDecl)
        self.assertTrue(all(isinstance(s, TypeSpec) for s in decl.specs))
        self.assertEqual([s.alias for s in decl.specs], [True, False, False])
        self.assertIsNotNone(decl.specs[2].type_params)


class TestWalk(unittest.TestCase):
    """Test the pre-order walk of the syntax model."""

    def test_walk_skips_opaque_contents(self):
        source_file = _build("package demo\n\ntype T struct{ a int }\n\nfunc F(a int) { _ = a }\n")
        kinds = [type(n).__name__ for n in walk(source_file)]

        self.assertEqual(kinds[0], "SourceFile")
        self.assertIn("GenDecl", kinds)
        self.assertNotIn("TypeSpec", kinds)
        self.assertEqual(kinds[-1], "Block")


if __name__ == "__main__":
    unittest.main()
