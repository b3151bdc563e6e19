"""
Conversion of tree-sitter Go trees into the syntax model.

Only what signature analysis needs is modelled: package clause, imports,
type declarations and function/method signatures. Function bodies and
var/const declarations are kept as opaque spans.
"""

import logging
from typing import List, Optional

from tree_sitter import Node, Tree

from goparse.comments import group_comments
from goparse.config import (
    COMMENT_NODE,
    FUNCTION_DECLARATION,
    GEN_DECL_TOKENS,
    METHOD_DECLARATION,
    PACKAGE_CLAUSE,
    PARAMETER_DECLARATION,
    TYPE_NODE_KINDS,
    TYPE_PARAMETER_DECLARATION,
    VARIADIC_PARAMETER_DECLARATION,
)
from goparse.syntax import (
    Block,
    Comment,
    Decl,
    Field,
    FieldList,
    FuncDecl,
    GenDecl,
    Ident,
    ImportSpec,
    SourceFile,
    Span,
    TypeExpr,
    TypeSpec,
)

logger = logging.getLogger(__name__)


def span_of(node: Node, start: Optional[Node] = None) -> Span:
    """Build a Span for ``node``, optionally starting at ``start`` instead."""
    first = start if start is not None else node
    return Span(
        start_byte=first.start_byte,
        end_byte=node.end_byte,
        start_row=first.start_point.row,
        end_row=node.end_point.row,
        start_column=first.start_point.column,
    )


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def _named(node: Node) -> List[Node]:
    """Named children, skipping comments."""
    return [c for c in node.named_children if c.type != COMMENT_NODE]


def _ident(node: Node, source_bytes: bytes) -> Ident:
    return Ident(span=span_of(node), name=node_text(node, source_bytes))


def build_type_expr(node: Node, source_bytes: bytes) -> TypeExpr:
    """Build a TypeExpr from any tree-sitter type node."""
    text = " ".join(node_text(node, source_bytes).split())
    kind = TYPE_NODE_KINDS.get(node.type, "other")
    expr = TypeExpr(span=span_of(node), kind=kind, text=text)

    if kind == "name":
        expr.name = text
    elif kind == "qualified":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        expr.package = node_text(package, source_bytes) if package else None
        expr.name = node_text(name, source_bytes) if name else None
    elif kind in ("pointer", "paren"):
        inner = _named(node)
        if inner:
            expr.elements.append(build_type_expr(inner[0], source_bytes))
    elif kind in ("slice", "array"):
        element = node.child_by_field_name("element")
        if element is not None:
            expr.elements.append(build_type_expr(element, source_bytes))
    elif kind == "map":
        for field_name in ("key", "value"):
            part = node.child_by_field_name(field_name)
            if part is not None:
                expr.elements.append(build_type_expr(part, source_bytes))
    elif kind == "chan":
        value = node.child_by_field_name("value")
        if value is not None:
            expr.elements.append(build_type_expr(value, source_bytes))
    elif kind == "generic":
        base = node.child_by_field_name("type")
        if base is not None:
            expr.elements.append(build_type_expr(base, source_bytes))
        arguments = node.child_by_field_name("type_arguments")
        if arguments is not None:
            for arg in _named(arguments):
                # Newer grammars wrap each argument in type_elem
                if arg.type == "type_elem":
                    members = _named(arg)
                    if len(members) == 1:
                        arg = members[0]
                expr.elements.append(build_type_expr(arg, source_bytes))
    elif kind == "func":
        params = node.child_by_field_name("parameters")
        if params is not None:
            expr.params = build_field_list(params, source_bytes)
        expr.results = _build_results(node.child_by_field_name("result"), source_bytes)
    elif kind == "struct":
        for child in _named(node):
            if child.type == "field_declaration_list":
                expr.fields = [
                    _build_struct_field(f, source_bytes)
                    for f in _named(child)
                    if f.type == "field_declaration"
                ]

    return expr


def _build_struct_field(node: Node, source_bytes: bytes) -> Field:
    names = [_ident(n, source_bytes) for n in node.children_by_field_name("name")]
    type_node = node.child_by_field_name("type")
    return Field(
        span=span_of(node),
        names=names,
        type=build_type_expr(type_node, source_bytes),
    )


def _build_parameter(node: Node, source_bytes: bytes) -> Field:
    if node.type == VARIADIC_PARAMETER_DECLARATION:
        name = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        ellipsis = next((c for c in node.children if c.type == "..."), type_node)
        element = build_type_expr(type_node, source_bytes)
        return Field(
            span=span_of(node),
            names=[_ident(name, source_bytes)] if name is not None else [],
            type=TypeExpr(
                span=span_of(type_node, start=ellipsis),
                kind="ellipsis",
                text="..." + element.text,
                elements=[element],
            ),
            variadic=True,
        )

    names = [_ident(n, source_bytes) for n in node.children_by_field_name("name")]
    type_node = node.child_by_field_name("type")
    if node.type == TYPE_PARAMETER_DECLARATION:
        type_expr = TypeExpr(
            span=span_of(type_node),
            kind="constraint",
            text=" ".join(node_text(type_node, source_bytes).split()),
        )
    else:
        type_expr = build_type_expr(type_node, source_bytes)
    return Field(span=span_of(node), names=names, type=type_expr)


def build_field_list(node: Node, source_bytes: bytes) -> FieldList:
    """Build a FieldList from a parameter_list or type_parameter_list node."""
    fields = [
        _build_parameter(child, source_bytes)
        for child in _named(node)
        if child.type in (
            PARAMETER_DECLARATION,
            VARIADIC_PARAMETER_DECLARATION,
            TYPE_PARAMETER_DECLARATION,
        )
    ]
    return FieldList(span=span_of(node), fields=fields)


def _build_results(node: Optional[Node], source_bytes: bytes) -> Optional[FieldList]:
    """Result lists are either parenthesized or a single bare type."""
    if node is None:
        return None
    if node.type == "parameter_list":
        return build_field_list(node, source_bytes)
    type_expr = build_type_expr(node, source_bytes)
    return FieldList(
        span=type_expr.span,
        fields=[Field(span=type_expr.span, names=[], type=type_expr)],
    )


def build_function(node: Node, source_bytes: bytes) -> FuncDecl:
    """Build a FuncDecl from a function_declaration or method_declaration."""
    recv_node = node.child_by_field_name("receiver")
    type_params_node = node.child_by_field_name("type_parameters")
    body_node = node.child_by_field_name("body")

    decl = FuncDecl(
        span=span_of(node),
        name=_ident(node.child_by_field_name("name"), source_bytes),
        params=build_field_list(node.child_by_field_name("parameters"), source_bytes),
        results=_build_results(node.child_by_field_name("result"), source_bytes),
    )
    if recv_node is not None:
        decl.recv = build_field_list(recv_node, source_bytes)
    if type_params_node is not None:
        decl.type_params = build_field_list(type_params_node, source_bytes)
    if body_node is not None:
        decl.body = Block(span=span_of(body_node))
    return decl


def _build_import_spec(node: Node, source_bytes: bytes) -> ImportSpec:
    name = node.child_by_field_name("name")
    path = node.child_by_field_name("path")
    return ImportSpec(
        span=span_of(node),
        path=node_text(path, source_bytes).strip('"`'),
        name=node_text(name, source_bytes) if name is not None else None,
    )


def _build_type_spec(node: Node, source_bytes: bytes) -> TypeSpec:
    type_params = node.child_by_field_name("type_parameters")
    return TypeSpec(
        span=span_of(node),
        name=_ident(node.child_by_field_name("name"), source_bytes),
        type=build_type_expr(node.child_by_field_name("type"), source_bytes),
        alias=node.type == "type_alias",
        type_params=build_field_list(type_params, source_bytes) if type_params is not None else None,
    )


def build_gen_decl(node: Node, source_bytes: bytes) -> GenDecl:
    """Build a GenDecl; only import and type specs are modelled."""
    decl = GenDecl(span=span_of(node), token=GEN_DECL_TOKENS[node.type])
    if decl.token == "import":
        for child in _named(node):
            if child.type == "import_spec":
                decl.specs.append(_build_import_spec(child, source_bytes))
            elif child.type == "import_spec_list":
                decl.specs.extend(
                    _build_import_spec(spec, source_bytes)
                    for spec in _named(child)
                    if spec.type == "import_spec"
                )
    elif decl.token == "type":
        decl.specs.extend(
            _build_type_spec(child, source_bytes)
            for child in _named(node)
            if child.type in ("type_spec", "type_alias")
        )
    return decl


def _collect_comments(node: Node, source_bytes: bytes, out: List[Comment]) -> None:
    for child in node.children:
        if child.type == COMMENT_NODE:
            out.append(Comment(span=span_of(child), text=node_text(child, source_bytes)))
        else:
            _collect_comments(child, source_bytes, out)


def build_source_file(tree: Tree, source_bytes: bytes, file_path: str) -> SourceFile:
    """Build the syntax model of one parsed Go file.

    Args:
        tree: Tree parsed from ``source_bytes``.
        source_bytes: Raw file content.
        file_path: Path recorded on the result (used in diagnostics).

    Returns:
        SourceFile with declarations in source order and grouped comments.

    Raises:
        ValueError: If the file has no package clause.
    """
    root = tree.root_node
    clause = next((c for c in root.named_children if c.type == PACKAGE_CLAUSE), None)
    if clause is None:
        raise ValueError(f"{file_path}: missing package clause")
    package_ident = next(c for c in clause.named_children if c.type != COMMENT_NODE)

    decls: List[Decl] = []
    for child in root.named_children:
        if child.type in (FUNCTION_DECLARATION, METHOD_DECLARATION):
            decls.append(build_function(child, source_bytes))
        elif child.type in GEN_DECL_TOKENS:
            decls.append(build_gen_decl(child, source_bytes))

    comments: List[Comment] = []
    _collect_comments(root, source_bytes, comments)

    source_file = SourceFile(
        span=span_of(root, start=clause),
        path=file_path,
        package_name=_ident(package_ident, source_bytes),
        decls=decls,
        comments=group_comments(comments, source_bytes),
    )
    logger.debug(
        "Built %s: package %s, %d declarations, %d comment groups",
        file_path,
        source_file.package_name.name,
        len(decls),
        len(source_file.comments),
    )
    return source_file
