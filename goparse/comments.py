"""
Comment grouping and comment-to-node association.

Comments are first grouped the way the Go scanner groups them, then each group
is associated with exactly one syntax node. The association mirrors go/ast's
comment map: a group prefers the most recently closed node group (file,
declaration, field, spec or block) when it trails it, falls back to the
previous node under the same line rules, and otherwise attaches to the node
that follows it.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from goparse.syntax import (
    Comment,
    CommentGroup,
    SourceFile,
    SyntaxNode,
    walk,
)

logger = logging.getLogger(__name__)


def _has_code_before(index: int, comments: List[Comment], source: bytes) -> bool:
    """Check whether a non-comment token precedes comments[index] on its line."""
    comment = comments[index]
    line_start = source.rfind(b"\n", 0, comment.span.start_byte) + 1
    segment = bytearray(source[line_start:comment.span.start_byte])
    for prior in reversed(comments[:index]):
        if prior.span.end_byte <= line_start:
            break
        lo = max(prior.span.start_byte, line_start) - line_start
        hi = prior.span.end_byte - line_start
        segment[lo:hi] = b" " * (hi - lo)
    return bool(bytes(segment).strip())


def group_comments(comments: List[Comment], source: bytes) -> List[CommentGroup]:
    """Group adjacent comments.

    A group continues while the next comment is separated from the previous
    one by whitespace only and starts no later than the line after it ends.
    A comment that follows code on its line opens a group that only extends
    along that same line.

    Args:
        comments: Comments in any order.
        source: Raw bytes of the file the comments came from.

    Returns:
        Comment groups in source order.
    """
    ordered = sorted(comments, key=lambda c: c.span.start_byte)
    groups: List[CommentGroup] = []
    current: List[Comment] = []
    line_gap = 1

    for idx, comment in enumerate(ordered):
        if current:
            last = current[-1]
            between = source[last.span.end_byte:comment.span.start_byte]
            if not between.strip() and comment.span.start_row <= last.span.end_row + line_gap:
                current.append(comment)
                continue
            groups.append(CommentGroup(current))
        current = [comment]
        line_gap = 0 if _has_code_before(idx, ordered, source) else 1

    if current:
        groups.append(CommentGroup(current))
    return groups


def _pop_closed(stack: List[SyntaxNode], pos: int) -> Optional[SyntaxNode]:
    """Pop every node that ends at or before ``pos``; return the last popped."""
    top = None
    while stack and stack[-1].span.end_byte <= pos:
        top = stack.pop()
    return top


class CommentIndex:
    """Read-only lookup of the comment groups associated with each node."""

    def __init__(self, associations: Optional[Dict[SyntaxNode, List[CommentGroup]]] = None):
        self._map: Dict[SyntaxNode, List[CommentGroup]] = {}
        for node, groups in (associations or {}).items():
            self._map[node] = list(groups)

    def __len__(self) -> int:
        return len(self._map)

    def comments_for(self, node: SyntaxNode) -> List[CommentGroup]:
        """Comment groups attached to ``node`` in source order (may be empty)."""
        return list(self._map.get(node, ()))

    def merge(self, other: "CommentIndex") -> "CommentIndex":
        """Return a new index holding the associations of both indexes."""
        merged = CommentIndex(self._map)
        for node, groups in other._map.items():
            merged._map.setdefault(node, []).extend(groups)
        return merged

    @classmethod
    def merge_all(cls, indexes: Iterable["CommentIndex"]) -> "CommentIndex":
        merged = cls()
        for index in indexes:
            merged = merged.merge(index)
        return merged

    def _add(self, node: SyntaxNode, group: CommentGroup) -> None:
        self._map.setdefault(node, []).append(group)

    @classmethod
    def build(cls, source_file: SourceFile) -> "CommentIndex":
        """Associate every comment group of ``source_file`` with a node."""
        index = cls()
        groups = sorted(source_file.comments, key=lambda g: g.span.start_byte)
        if not groups:
            return index

        nodes = list(walk(source_file))
        opaque = [n for n in nodes if n.is_opaque]

        remaining: List[CommentGroup] = []
        for group in groups:
            container = next((n for n in opaque if n.span.contains(group.span)), None)
            if container is not None:
                index._add(container, group)
            else:
                remaining.append(group)

        stack: List[SyntaxNode] = []
        prev: Optional[SyntaxNode] = None
        prev_group: Optional[SyntaxNode] = None
        pos = 0

        for node in [*nodes, None]:
            if node is not None:
                node_byte, node_row = node.span.start_byte, node.span.start_row
            else:
                node_byte = node_row = 1 << 30

            while pos < len(remaining) and remaining[pos].span.end_byte <= node_byte:
                group = remaining[pos]
                gspan = group.span
                closed = _pop_closed(stack, gspan.start_byte)
                if closed is not None:
                    prev_group = closed

                if prev_group is not None and (
                    prev_group.span.end_row == gspan.start_row
                    or (
                        prev_group.span.end_row + 1 == gspan.start_row
                        and gspan.end_row + 1 < node_row
                    )
                ):
                    target = prev_group
                elif prev is not None and (
                    prev.span.end_row == gspan.start_row
                    or (prev.span.end_row + 1 == gspan.start_row and gspan.end_row + 1 < node_row)
                    or node is None
                ):
                    target = prev
                else:
                    target = node

                if target is None:
                    logger.debug("Dropping comment at row %d: no node to attach", gspan.start_row + 1)
                else:
                    index._add(target, group)
                pos += 1

            if node is None:
                break
            prev = node
            if node.is_group:
                _pop_closed(stack, node.span.start_byte)
                stack.append(node)

        logger.debug(
            "Associated %d comment groups in %s", len(groups), source_file.path
        )
        return index
