"""
Package loading: discover, parse and merge the files of one Go package.

This module provides the entry points that turn a directory into a single
CompilationUnit ready for type checking and catalog extraction.
"""

import logging
import os
from collections import OrderedDict
from typing import Dict, List

from tree_sitter import Tree

from goparse.builder import build_source_file
from goparse.comments import CommentIndex
from goparse.config import GO_EXTENSION, TEST_FILE_SUFFIX, TEST_PACKAGE_SUFFIX
from goparse.errors import AmbiguousPackageError, GoSyntaxError, PackageNotFoundError
from goparse.parser import count_error_nodes, first_error_point, parse_bytes, parse_file
from goparse.syntax import CompilationUnit, GenDecl, ImportSpec, SourceFile, SyntaxNode

logger = logging.getLogger(__name__)


def discover_go_files(directory: str) -> List[str]:
    """List the non-test Go source files directly inside a directory.

    Args:
        directory: Package directory (not searched recursively).

    Returns:
        Sorted absolute paths. Hidden files and ``*_test.go`` are excluded.

    Example:
        >>> files = discover_go_files("/path/to/pkg")
        >>> [os.path.basename(f) for f in files]
        ['a.go', 'b.go']
    """
    directory = os.path.abspath(directory)
    go_files = []
    for entry in os.listdir(directory):
        if entry.startswith(".") or entry.startswith("_"):
            continue
        if not entry.endswith(GO_EXTENSION) or entry.endswith(TEST_FILE_SUFFIX):
            continue
        path = os.path.join(directory, entry)
        if os.path.isfile(path):
            go_files.append(path)

    logger.debug("Found %d Go files in %s", len(go_files), directory)
    return sorted(go_files)


def load_source_file(file_path: str) -> SourceFile:
    """Parse one Go file into the syntax model.

    Raises:
        FileNotFoundError: If the file does not exist.
        GoSyntaxError: If the file contains syntax errors or no package clause.
    """
    tree, source_bytes = parse_file(file_path)
    return _build_checked(tree, source_bytes, file_path)


def load_source_bytes(source_bytes: bytes, file_path: str = "<memory>.go") -> SourceFile:
    """Parse in-memory Go source into the syntax model.

    Raises:
        GoSyntaxError: If the source contains syntax errors or no package clause.
    """
    return _build_checked(parse_bytes(source_bytes), source_bytes, file_path)


def _build_checked(tree: Tree, source_bytes: bytes, file_path: str) -> SourceFile:
    if tree.root_node.has_error:
        line, column = first_error_point(tree) or (1, 1)
        raise GoSyntaxError(
            f"{file_path}:{line}:{column}: syntax error "
            f"({count_error_nodes(tree)} error nodes)"
        )
    try:
        return build_source_file(tree, source_bytes, file_path)
    except ValueError as e:
        raise GoSyntaxError(str(e)) from e


def merge_package_files(package_name: str, files: List[SourceFile]) -> CompilationUnit:
    """Merge the files of one package into a single compilation unit.

    Declarations keep file order, then source order. Import specs with the
    same name and path are kept once. Comments are associated per file and
    only the associated ones survive the merge.

    Args:
        package_name: Name from the files' package clauses.
        files: Parsed files, already in the desired order.

    Returns:
        The merged CompilationUnit.
    """
    decls = []
    imports: List[ImportSpec] = []
    seen_imports = set()
    origins: Dict[SyntaxNode, str] = {}

    for source_file in files:
        for decl in source_file.decls:
            decls.append(decl)
            origins[decl] = source_file.path
            if isinstance(decl, GenDecl):
                for spec in decl.specs:
                    origins[spec] = source_file.path
        for spec in source_file.imports:
            if spec.key() in seen_imports:
                logger.debug("Dropping duplicate import %s in %s", spec.path, source_file.path)
                continue
            seen_imports.add(spec.key())
            imports.append(spec)

    comments = CommentIndex.merge_all(CommentIndex.build(f) for f in files)

    return CompilationUnit(
        package_name=package_name,
        files=[f.path for f in files],
        decls=decls,
        imports=imports,
        comments=comments,
        origins=origins,
    )


def load_package(directory: str) -> CompilationUnit:
    """Load the single non-test package in a directory.

    Args:
        directory: Path of the package directory.

    Returns:
        CompilationUnit of all the package's non-test files.

    Raises:
        FileNotFoundError: If the directory does not exist.
        GoSyntaxError: If any file fails to parse.
        PackageNotFoundError: If no non-test package is found.
        AmbiguousPackageError: If more than one non-test package is found.
    """
    directory = os.path.abspath(directory)
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    source_files = [load_source_file(path) for path in discover_go_files(directory)]
    return _select_package(directory, source_files)


def load_package_sources(sources: Dict[str, bytes], label: str = "<memory>") -> CompilationUnit:
    """Load a package from in-memory files, keyed by file name.

    Files are merged in sorted name order; ``*_test.go`` names are skipped,
    as in ``load_package``.

    Raises:
        GoSyntaxError: If any source fails to parse.
        PackageNotFoundError: If no non-test package is found.
        AmbiguousPackageError: If more than one non-test package is found.
    """
    source_files = [
        load_source_bytes(sources[name], name)
        for name in sorted(sources)
        if not name.endswith(TEST_FILE_SUFFIX)
    ]
    return _select_package(label, source_files)


def _select_package(location: str, source_files: List[SourceFile]) -> CompilationUnit:
    packages: "OrderedDict[str, List[SourceFile]]" = OrderedDict()
    for source_file in source_files:
        packages.setdefault(source_file.package_name.name, []).append(source_file)

    names = [name for name in packages if not name.endswith(TEST_PACKAGE_SUFFIX)]
    if not names:
        raise PackageNotFoundError(location)
    if len(names) > 1:
        raise AmbiguousPackageError(location, names)

    package_name = names[0]
    unit = merge_package_files(package_name, packages[package_name])
    logger.info(
        "Loaded package %s from %s (%d files, %d declarations)",
        package_name,
        location,
        len(unit.files),
        len(unit.decls),
    )
    return unit
