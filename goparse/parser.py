"""
Go source parsing with tree-sitter.

Trees are returned even when they contain errors; callers decide whether a
tree with ERROR or missing nodes is acceptable (the loader rejects them).
"""

import logging
from typing import Optional, Tuple

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tsgo.language())


def create_parser() -> Parser:
    """Return a new parser bound to the Go grammar."""
    return Parser(GO_LANGUAGE)


def parse_bytes(source: bytes) -> Tree:
    """Parse Go source held in memory.

    Raises:
        TypeError: If ``source`` is not bytes.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    if tree.root_node.has_error:
        logger.warning("Go source has %d syntax error nodes", count_error_nodes(tree))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Read and parse one ``.go`` file; returns the tree and the bytes it was built from.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except OSError as e:
        logger.error("Cannot read %s: %s", file_path, e)
        raise

    logger.debug("Parsing %s (%d bytes)", file_path, len(source_bytes))
    return parse_bytes(source_bytes), source_bytes


def _count_errors(node: Node) -> int:
    count = 1 if (node.type == "ERROR" or node.is_missing) else 0
    for child in node.children:
        count += _count_errors(child)
    return count


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and missing nodes in a parsed tree."""
    if not tree.root_node.has_error:
        return 0
    return _count_errors(tree.root_node)


def first_error_point(tree: Tree) -> Optional[Tuple[int, int]]:
    """Return the 1-indexed (line, column) of the first syntax error, if any."""
    if not tree.root_node.has_error:
        return None
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point.row + 1, node.start_point.column + 1
        stack.extend(reversed(node.children))
    return None
