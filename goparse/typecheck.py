"""
Signature type resolution for a merged Go compilation unit.

This is a deliberately small type checker: it resolves every type expression
that appears in a function or method signature or in a package-level type
declaration, and records the result per expression node. Function bodies and
values are never inspected. Imported packages are not loaded; their types are
represented by opaque named types.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Set

from goparse.config import (
    ERROR_TYPE_NAME,
    UNIVERSE_INTERFACES,
    UNSAFE_PACKAGE_PATH,
    UNSAFE_POINTER_NAME,
)
from goparse.errors import TypeCheckError
from goparse.syntax import (
    CompilationUnit,
    FieldList,
    FuncDecl,
    GenDecl,
    ImportSpec,
    SyntaxNode,
    TypeExpr,
    TypeSpec,
)

logger = logging.getLogger(__name__)

_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")
_DOT_VERSION_RE = re.compile(r"\.v[0-9]+$")


class BasicKind(IntEnum):
    """Basic type kinds, numbered as in go/types."""

    INVALID = 0
    BOOL = 1
    INT = 2
    INT8 = 3
    INT16 = 4
    INT32 = 5
    INT64 = 6
    UINT = 7
    UINT8 = 8
    UINT16 = 9
    UINT32 = 10
    UINT64 = 11
    UINTPTR = 12
    FLOAT32 = 13
    FLOAT64 = 14
    COMPLEX64 = 15
    COMPLEX128 = 16
    STRING = 17
    UNSAFE_POINTER = 18

    @property
    def go_name(self) -> str:
        if self is BasicKind.UNSAFE_POINTER:
            return "unsafe.Pointer"
        return self.name.lower()


class ResolvedType:
    """Base class of resolved types."""

    def underlying(self) -> "ResolvedType":
        return self


@dataclass(frozen=True)
class Basic(ResolvedType):
    kind: BasicKind
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer(ResolvedType):
    elem: ResolvedType

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class Composite(ResolvedType):
    """Any unnamed non-basic, non-pointer type (slice, map, struct, ...)."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TypeParam(ResolvedType):
    name: str

    def __str__(self) -> str:
        return self.name


class Named(ResolvedType):
    """A defined type. Identity matters: two Named objects are never equal."""

    def __init__(self, package: Optional[str], name: str,
                 underlying: Optional[ResolvedType] = None):
        self.package = package
        self.name = name
        self._underlying = underlying

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    @property
    def is_complete(self) -> bool:
        return self._underlying is not None

    def set_underlying(self, underlying: ResolvedType) -> None:
        self._underlying = underlying

    def underlying(self) -> ResolvedType:
        return self._underlying if self._underlying is not None else self

    def __str__(self) -> str:
        return self.qualified_name

    def __repr__(self) -> str:
        return f"Named({self.qualified_name!r})"


BASIC_TYPES: Dict[str, Basic] = {
    kind.go_name: Basic(kind, kind.go_name)
    for kind in BasicKind
    if kind not in (BasicKind.INVALID, BasicKind.UNSAFE_POINTER)
}
BASIC_TYPES["byte"] = Basic(BasicKind.UINT8, "byte")
BASIC_TYPES["rune"] = Basic(BasicKind.INT32, "rune")

UNSAFE_POINTER = Basic(BasicKind.UNSAFE_POINTER, "unsafe.Pointer")

ERROR_TYPE = Named(None, ERROR_TYPE_NAME, Composite("interface{ Error() string }"))


class TypeInfo:
    """Resolved types of the type expressions of one compilation unit."""

    def __init__(self):
        self._types: Dict[SyntaxNode, ResolvedType] = {}

    def __len__(self) -> int:
        return len(self._types)

    def record(self, expr: TypeExpr, resolved: ResolvedType) -> None:
        self._types[expr] = resolved

    def type_of(self, expr: SyntaxNode) -> ResolvedType:
        """Return the resolved type of ``expr``.

        Raises:
            KeyError: If ``expr`` was not part of the checked unit.
        """
        try:
            return self._types[expr]
        except KeyError:
            raise KeyError(f"no type recorded for expression at row {expr.span.start_row + 1}") from None


def guess_package_name(path: str) -> str:
    """Guess the package name an import path binds when it has no alias.

    Major-version suffixes (``/v2``, ``.v3``) and ``go-``/``-go`` affixes are
    dropped, as they are almost never part of the package clause.
    """
    parts = [p for p in path.split("/") if p]
    last = parts[-1] if parts else path
    if _MAJOR_VERSION_RE.match(last) and len(parts) > 1:
        last = parts[-2]
    last = _DOT_VERSION_RE.sub("", last)
    if last.startswith("go-"):
        last = last[3:]
    if last.endswith("-go"):
        last = last[:-3]
    return last.replace("-", "_").replace(".", "_")


class _Checker:
    def __init__(self, unit: CompilationUnit, package_path: str):
        self.unit = unit
        self.package_path = package_path
        self.info = TypeInfo()
        self.specs: Dict[str, TypeSpec] = {}
        self.named: Dict[str, Named] = {}
        self.aliases: Dict[str, ResolvedType] = {}
        # imports are file scoped, keyed by the path the spec came from
        self.imports: Dict[str, Dict[str, str]] = {}
        self.dot_imports: Dict[str, List[str]] = {}
        self.external: Dict[str, Named] = {}
        self._resolving: Set[str] = set()
        self._paths: List[str] = [unit.package_name]

        for decl in unit.decls:
            if isinstance(decl, GenDecl) and decl.token == "import":
                for spec in decl.specs:
                    self._declare_import(spec, unit.path_of(spec))

        for spec in unit.type_specs():
            name = spec.name.name
            if name in self.specs:
                raise self._error(spec.name, f"{name} redeclared in this block")
            self.specs[name] = spec
            if not spec.alias:
                self.named[name] = Named(package_path, name)

    def _error(self, node: SyntaxNode, message: str) -> TypeCheckError:
        return TypeCheckError(
            f"{self._paths[-1]}:{node.span.start_row + 1}:"
            f"{node.span.start_column + 1}: {message}"
        )

    def _declare_import(self, spec: ImportSpec, file_path: str) -> None:
        if spec.name == "_":
            return
        if spec.name == ".":
            self.dot_imports.setdefault(file_path, []).append(spec.path)
            return
        table = self.imports.setdefault(file_path, {})
        table[spec.name or guess_package_name(spec.path)] = spec.path

    def check(self) -> TypeInfo:
        for name in self.specs:
            self._define(name)
        for decl in self.unit.func_decls():
            self._check_signature(decl)
        logger.debug(
            "Checked package %s: %d type declarations, %d signatures",
            self.unit.package_name,
            len(self.specs),
            len(self.unit.func_decls()),
        )
        return self.info

    def _define(self, name: str) -> ResolvedType:
        """Resolve a package-level type name, completing its declaration."""
        spec = self.specs[name]
        if spec.alias:
            if name in self.aliases:
                return self.aliases[name]
        elif self.named[name].is_complete:
            return self.named[name]

        if name in self._resolving:
            raise self._error(spec.name, f"invalid recursive type {name}")
        self._resolving.add(name)
        self._paths.append(self.unit.path_of(spec))
        try:
            scope = self._type_param_scope(spec.type_params)
            rhs = self._resolve(spec.type, scope)
            if spec.alias:
                self.aliases[name] = rhs
                return rhs
            if isinstance(rhs, Named) and rhs.package == self.package_path and rhs.name in self.named:
                rhs = self._define(rhs.name)
            self.named[name].set_underlying(rhs.underlying())
            return self.named[name]
        finally:
            self._paths.pop()
            self._resolving.discard(name)

    def _lookup(self, name: str) -> ResolvedType:
        if self.specs[name].alias:
            return self._define(name)
        return self.named[name]

    @staticmethod
    def _type_param_scope(type_params: Optional[FieldList]) -> Dict[str, ResolvedType]:
        scope: Dict[str, ResolvedType] = {}
        if type_params is not None:
            for field in type_params.fields:
                for ident in field.names:
                    scope[ident.name] = TypeParam(ident.name)
        return scope

    def _check_signature(self, decl: FuncDecl) -> None:
        self._paths.append(self.unit.path_of(decl))
        try:
            self._check_signature_types(decl)
        finally:
            self._paths.pop()

    def _check_signature_types(self, decl: FuncDecl) -> None:
        scope = self._type_param_scope(decl.type_params)
        if decl.type_params is not None:
            for field in decl.type_params.fields:
                self.info.record(field.type, Composite(field.type.text))

        if decl.recv is not None:
            for field in decl.recv.fields:
                scope.update(self._receiver_type_params(field.type))
            self._resolve_fields(decl.recv, scope)

        self._resolve_fields(decl.params, scope)
        if decl.results is not None:
            self._resolve_fields(decl.results, scope)

    def _receiver_type_params(self, expr: TypeExpr) -> Dict[str, ResolvedType]:
        """Type parameters introduced by a receiver such as ``(l *List[T])``."""
        while expr.kind in ("pointer", "paren") and expr.elements:
            expr = expr.elements[0]
        scope: Dict[str, ResolvedType] = {}
        if expr.kind == "generic":
            for arg in expr.elements[1:]:
                if arg.kind == "name" and arg.name:
                    scope[arg.name] = TypeParam(arg.name)
        return scope

    def _resolve_fields(self, fields: Optional[FieldList], scope: Dict[str, ResolvedType]) -> None:
        if fields is None:
            return
        for field in fields.fields:
            self._resolve(field.type, scope)

    def _resolve_name(self, expr: TypeExpr, scope: Dict[str, ResolvedType]) -> ResolvedType:
        name = expr.name or ""
        if name in scope:
            return scope[name]
        if name in self.specs:
            return self._lookup(name)
        if name in BASIC_TYPES:
            return BASIC_TYPES[name]
        if name == ERROR_TYPE_NAME:
            return ERROR_TYPE
        if name in UNIVERSE_INTERFACES:
            return Composite(name)
        dot_imports = self.dot_imports.get(self._paths[-1], [])
        if name == UNSAFE_POINTER_NAME and UNSAFE_PACKAGE_PATH in dot_imports:
            return UNSAFE_POINTER
        external = [path for path in dot_imports if path != UNSAFE_PACKAGE_PATH]
        if external:
            return self._external_type(external[0], name)
        raise self._error(expr, f"undefined: {name}")

    def _resolve_qualified(self, expr: TypeExpr) -> ResolvedType:
        package = expr.package or ""
        imports = self.imports.get(self._paths[-1], {})
        if package not in imports:
            raise self._error(expr, f"undefined: {package}")
        path = imports[package]
        if path == UNSAFE_PACKAGE_PATH:
            if expr.name == UNSAFE_POINTER_NAME:
                return UNSAFE_POINTER
            raise self._error(expr, f"undefined: {package}.{expr.name}")
        return self._external_type(path, expr.name or "")

    def _external_type(self, path: str, name: str) -> Named:
        key = f"{path}.{name}"
        if key not in self.external:
            self.external[key] = Named(path, name)
        return self.external[key]

    def _resolve(self, expr: TypeExpr, scope: Dict[str, ResolvedType]) -> ResolvedType:
        resolved: ResolvedType
        if expr.kind == "name":
            resolved = self._resolve_name(expr, scope)
        elif expr.kind == "qualified":
            resolved = self._resolve_qualified(expr)
        elif expr.kind == "pointer":
            resolved = Pointer(self._resolve(expr.elements[0], scope))
        elif expr.kind == "paren":
            resolved = self._resolve(expr.elements[0], scope)
        elif expr.kind == "ellipsis":
            elem = self._resolve(expr.elements[0], scope)
            resolved = Composite(f"[]{elem}")
        elif expr.kind == "generic":
            base = self._resolve(expr.elements[0], scope)
            args = [str(self._resolve(arg, scope)) for arg in expr.elements[1:]]
            if isinstance(base, Named):
                resolved = Named(
                    base.package,
                    f"{base.name}[{', '.join(args)}]",
                    base.underlying() if base.is_complete else None,
                )
            else:
                resolved = Composite(expr.text)
        else:
            for elem in expr.elements:
                self._resolve(elem, scope)
            for field in expr.fields:
                self._resolve(field.type, scope)
            self._resolve_fields(expr.params, scope)
            self._resolve_fields(expr.results, scope)
            resolved = Composite(expr.text)

        self.info.record(expr, resolved)
        return resolved


def check_package(unit: CompilationUnit, package_path: Optional[str] = None) -> TypeInfo:
    """Resolve all signature and type-declaration types of ``unit``.

    Args:
        unit: Merged compilation unit.
        package_path: Qualifier used when printing the package's own named
            types. Defaults to the package name.

    Returns:
        TypeInfo covering every type expression in signatures and type
        declarations.

    Raises:
        TypeCheckError: On undefined identifiers or packages, unknown
            ``unsafe`` members, redeclared or recursively defined types.
    """
    checker = _Checker(unit, package_path or unit.package_name)
    return checker.check()
