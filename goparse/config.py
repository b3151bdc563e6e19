"""
Configuration constants for Go syntax loading.

Defines the tree-sitter node type strings and Go language names used while
building the syntax model and resolving signature types.
"""

from typing import Dict, Set

# Top-level declaration node types
FUNCTION_DECLARATION: str = "function_declaration"
METHOD_DECLARATION: str = "method_declaration"
IMPORT_DECLARATION: str = "import_declaration"
TYPE_DECLARATION: str = "type_declaration"
VAR_DECLARATION: str = "var_declaration"
CONST_DECLARATION: str = "const_declaration"
PACKAGE_CLAUSE: str = "package_clause"

# Generic declarations, keyed by node type -> Go token
GEN_DECL_TOKENS: Dict[str, str] = {
    IMPORT_DECLARATION: "import",
    TYPE_DECLARATION: "type",
    VAR_DECLARATION: "var",
    CONST_DECLARATION: "const",
}

# Comment node type (both // and /* */)
COMMENT_NODE: str = "comment"

# Parameter list members
PARAMETER_DECLARATION: str = "parameter_declaration"
VARIADIC_PARAMETER_DECLARATION: str = "variadic_parameter_declaration"
TYPE_PARAMETER_DECLARATION: str = "type_parameter_declaration"

# Type expression node types -> TypeExpr kind
TYPE_NODE_KINDS: Dict[str, str] = {
    "type_identifier": "name",
    "qualified_type": "qualified",
    "pointer_type": "pointer",
    "slice_type": "slice",
    "array_type": "array",
    "implicit_length_array_type": "array",
    "map_type": "map",
    "channel_type": "chan",
    "function_type": "func",
    "struct_type": "struct",
    "interface_type": "interface",
    "parenthesized_type": "paren",
    "generic_type": "generic",
}

# TypeExpr kinds whose inner comments are not associated individually
OPAQUE_TYPE_KINDS: Set[str] = {"struct", "interface", "func"}

# Go source files
GO_EXTENSION: str = ".go"
TEST_FILE_SUFFIX: str = "_test.go"
TEST_PACKAGE_SUFFIX: str = "_test"

# Universe types that are not basic
ERROR_TYPE_NAME: str = "error"
UNIVERSE_INTERFACES: Set[str] = {"any", "comparable"}

# Package providing the unsafe address type
UNSAFE_PACKAGE_PATH: str = "unsafe"
UNSAFE_POINTER_NAME: str = "Pointer"

# Comment prefixes Go treats as directives rather than documentation
DIRECTIVE_PREFIXES: tuple = (
    "line ",
    "extern ",
    "export ",
)
