"""
Layer 1: Go package loading

Tree-sitter-based Go parsing, syntax model, comment association and
signature type resolution.
"""

from goparse.errors import (
    AmbiguousPackageError,
    CatalogError,
    GoSyntaxError,
    PackageLoadError,
    PackageNotFoundError,
    TypeCheckError,
)
from goparse.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from goparse.builder import build_source_file
from goparse.comments import CommentIndex, group_comments
from goparse.loader import (
    discover_go_files,
    load_package,
    load_package_sources,
    load_source_bytes,
    load_source_file,
    merge_package_files,
)
from goparse.typecheck import BasicKind, TypeInfo, check_package

__all__ = [
    # Errors
    "CatalogError",
    "PackageLoadError",
    "PackageNotFoundError",
    "AmbiguousPackageError",
    "GoSyntaxError",
    "TypeCheckError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "build_source_file",
    # Comments
    "CommentIndex",
    "group_comments",
    # Package loading
    "discover_go_files",
    "load_package",
    "load_package_sources",
    "load_source_bytes",
    "load_source_file",
    "merge_package_files",
    # Types
    "BasicKind",
    "TypeInfo",
    "check_package",
]
