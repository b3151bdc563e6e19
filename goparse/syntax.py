"""
Syntax model for Go compilation units.

Nodes are plain dataclasses compared by identity, so they can key the comment
index and the type map the same way go/ast pointers do. Every node carries the
source span it was built from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Dict, Iterator, List, Optional, Union

from goparse.config import DIRECTIVE_PREFIXES, OPAQUE_TYPE_KINDS

if TYPE_CHECKING:
    from goparse.comments import CommentIndex

_DIRECTIVE_RE = re.compile(r"^[a-z0-9]+:[a-z0-9]")


@dataclass(frozen=True)
class Span:
    """Byte and row range of a node (rows are 0-indexed, end exclusive)."""

    start_byte: int
    end_byte: int
    start_row: int
    end_row: int
    start_column: int = 0

    def contains(self, other: "Span") -> bool:
        return self.start_byte <= other.start_byte and other.end_byte <= self.end_byte


@dataclass(eq=False)
class SyntaxNode:
    """Base node. ``is_group`` marks the nodes comments prefer to attach to."""

    span: Span

    is_group: ClassVar[bool] = False

    @property
    def is_opaque(self) -> bool:
        return False

    def children(self) -> List["SyntaxNode"]:
        return []


@dataclass(eq=False)
class Ident(SyntaxNode):
    name: str

    def is_exported(self) -> bool:
        return bool(self.name) and self.name[0].isupper()


@dataclass(eq=False)
class TypeExpr(SyntaxNode):
    """A type expression.

    ``kind`` is one of: name, qualified, pointer, slice, array, map, chan,
    func, struct, interface, paren, generic, ellipsis, constraint, other.
    ``elements`` holds the nested type expressions in source order (element
    type, key/value, base type followed by type arguments).
    """

    kind: str
    text: str
    name: Optional[str] = None
    package: Optional[str] = None
    elements: List["TypeExpr"] = field(default_factory=list)
    fields: List["Field"] = field(default_factory=list)
    params: Optional["FieldList"] = None
    results: Optional["FieldList"] = None

    @property
    def is_opaque(self) -> bool:
        return self.kind in OPAQUE_TYPE_KINDS

    def children(self) -> List[SyntaxNode]:
        if self.is_opaque:
            return []
        return list(self.elements)


@dataclass(eq=False)
class Field(SyntaxNode):
    """One entry of a parameter, result, receiver or struct field list."""

    names: List[Ident]
    type: TypeExpr
    variadic: bool = False

    is_group: ClassVar[bool] = True

    def children(self) -> List[SyntaxNode]:
        return [*self.names, self.type]


@dataclass(eq=False)
class FieldList(SyntaxNode):
    fields: List[Field] = field(default_factory=list)

    def num_fields(self) -> int:
        """Number of parameters or results, counting each name separately."""
        n = 0
        for f in self.fields:
            n += len(f.names) if f.names else 1
        return n

    def children(self) -> List[SyntaxNode]:
        return list(self.fields)


@dataclass(eq=False)
class Block(SyntaxNode):
    """A function body. Its statements are not modelled."""

    is_group: ClassVar[bool] = True

    @property
    def is_opaque(self) -> bool:
        return True


@dataclass(eq=False)
class FuncDecl(SyntaxNode):
    name: Ident
    params: FieldList
    recv: Optional[FieldList] = None
    type_params: Optional[FieldList] = None
    results: Optional[FieldList] = None
    body: Optional[Block] = None

    is_group: ClassVar[bool] = True

    @property
    def is_method(self) -> bool:
        return self.recv is not None

    @property
    def is_generic(self) -> bool:
        return self.type_params is not None and bool(self.type_params.fields)

    def result_fields(self) -> List[Field]:
        return self.results.fields if self.results is not None else []

    def num_results(self) -> int:
        return self.results.num_fields() if self.results is not None else 0

    def children(self) -> List[SyntaxNode]:
        nodes: List[SyntaxNode] = []
        if self.recv is not None:
            nodes.append(self.recv)
        nodes.append(self.name)
        for part in (self.type_params, self.params, self.results, self.body):
            if part is not None:
                nodes.append(part)
        return nodes


@dataclass(eq=False)
class ImportSpec(SyntaxNode):
    path: str
    name: Optional[str] = None

    is_group: ClassVar[bool] = True

    def key(self) -> tuple:
        return (self.name, self.path)


@dataclass(eq=False)
class TypeSpec(SyntaxNode):
    name: Ident
    type: TypeExpr
    alias: bool = False
    type_params: Optional[FieldList] = None

    is_group: ClassVar[bool] = True


@dataclass(eq=False)
class GenDecl(SyntaxNode):
    """import, type, var or const declaration."""

    token: str
    specs: List[Union[ImportSpec, TypeSpec]] = field(default_factory=list)

    is_group: ClassVar[bool] = True

    @property
    def is_opaque(self) -> bool:
        return True


Decl = Union[FuncDecl, GenDecl]


@dataclass(eq=False)
class Comment(SyntaxNode):
    """A single // or /* */ comment, text including delimiters."""

    text: str


def _is_directive(text: str) -> bool:
    if text.startswith(DIRECTIVE_PREFIXES):
        return True
    return bool(_DIRECTIVE_RE.match(text))


@dataclass(eq=False)
class CommentGroup:
    """A sequence of comments with no other tokens and no empty lines between."""

    comments: List[Comment]

    @property
    def span(self) -> Span:
        first, last = self.comments[0].span, self.comments[-1].span
        return Span(
            start_byte=first.start_byte,
            end_byte=last.end_byte,
            start_row=first.start_row,
            end_row=last.end_row,
            start_column=first.start_column,
        )

    def text(self) -> str:
        """Render the group as documentation text.

        Comment markers and directive comments are removed, trailing
        whitespace is stripped from every line, leading blank lines are
        dropped and runs of blank lines collapse to one. Non-empty results
        end with a newline.
        """
        lines: List[str] = []
        for comment in self.comments:
            c = comment.text
            if c.startswith("//"):
                c = c[2:]
                if c.startswith(" "):
                    c = c[1:]
                elif _is_directive(c):
                    continue
            elif c.startswith("/*"):
                c = c[2:-2]
            for line in c.split("\n"):
                lines.append(line.rstrip())

        kept: List[str] = []
        for line in lines:
            if line or (kept and kept[-1]):
                kept.append(line)
        while kept and not kept[-1]:
            kept.pop()
        if not kept:
            return ""
        return "\n".join(kept) + "\n"


@dataclass(eq=False)
class SourceFile(SyntaxNode):
    path: str
    package_name: Ident
    decls: List[Decl] = field(default_factory=list)
    comments: List[CommentGroup] = field(default_factory=list)

    is_group: ClassVar[bool] = True

    @property
    def imports(self) -> List[ImportSpec]:
        specs: List[ImportSpec] = []
        for decl in self.decls:
            if isinstance(decl, GenDecl) and decl.token == "import":
                specs.extend(s for s in decl.specs if isinstance(s, ImportSpec))
        return specs

    def children(self) -> List[SyntaxNode]:
        return [self.package_name, *self.decls]


@dataclass(eq=False)
class CompilationUnit:
    """All non-test files of one package merged into a single declaration list."""

    package_name: str
    files: List[str]
    decls: List[Decl]
    imports: List[ImportSpec]
    comments: "CommentIndex"
    origins: Dict[SyntaxNode, str] = field(default_factory=dict)

    def path_of(self, node: SyntaxNode) -> str:
        """File a declaration or type spec came from (package name if unknown)."""
        return self.origins.get(node, self.package_name)

    def func_decls(self) -> List[FuncDecl]:
        return [d for d in self.decls if isinstance(d, FuncDecl)]

    def type_specs(self) -> List[TypeSpec]:
        specs: List[TypeSpec] = []
        for decl in self.decls:
            if isinstance(decl, GenDecl) and decl.token == "type":
                specs.extend(s for s in decl.specs if isinstance(s, TypeSpec))
        return specs


def walk(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield ``node`` and its descendants in lexical pre-order.

    Opaque nodes are yielded but not descended into.
    """
    yield node
    if node.is_opaque:
        return
    for child in node.children():
        yield from walk(child)
