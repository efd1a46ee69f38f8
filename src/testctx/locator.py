"""Locate named declarations and the namespace clause in a syntax tree."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from testctx.models import DeclarationMatch
from testctx.parsers.base import GrammarProfile, node_text

logger = logging.getLogger(__name__)


@dataclass
class LocatedDeclaration:
    """A declaration node together with its reconstructed text."""
    node: object  # tree-sitter Node
    match: DeclarationMatch


def walk(node) -> Iterator:
    """Yield nodes depth-first in document order without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _leading_comment(node, source: bytes, profile: GrammarProfile) -> str:
    """Collect the comment nodes directly above a declaration.

    Only comments whose last row touches the row below them are attached, so a
    blank line detaches a comment block from the declaration. A comment that
    trails code on its own line belongs to that code and ends the block.
    """
    comments = []
    expected_row = node.start_point[0] - 1
    sibling = node.prev_named_sibling
    while (
        sibling is not None
        and sibling.type == profile.comment_kind
        and sibling.end_point[0] == expected_row
    ):
        previous = sibling.prev_named_sibling
        if previous is not None and previous.end_point[0] == sibling.start_point[0]:
            break
        comments.append(node_text(sibling, source))
        expected_row = sibling.start_point[0] - 1
        sibling = sibling.prev_named_sibling

    comments.reverse()
    return "\n".join(comments)


def _find_by_kind(
    root,
    source: bytes,
    name: str,
    kind: str,
    name_kind: str,
    profile: GrammarProfile,
    row: int | None,
) -> LocatedDeclaration | None:
    for node in walk(root):
        if node.type != kind:
            continue
        name_node = node.child_by_field_name(profile.name_field)
        if name_node is None or name_node.type != name_kind:
            continue
        if node_text(name_node, source) != name:
            continue
        if row is not None and name_node.start_point[0] != row:
            continue

        match = DeclarationMatch(
            name=name,
            body_text=node_text(node, source),
            comment=_leading_comment(node, source, profile),
        )
        return LocatedDeclaration(node=node, match=match)
    return None


def find_declaration(
    root,
    source: bytes,
    name: str,
    profile: GrammarProfile,
    row: int | None = None,
) -> LocatedDeclaration | None:
    """Find a function or method declaration by exact name.

    Free functions are searched first; methods are only considered when no
    free function has the name.

    Args:
        root: Root node of the parsed tree
        source: Source bytes the tree was parsed from
        name: Identifier to match exactly
        profile: Grammar profile describing declaration node kinds
        row: If given, only accept a declaration whose name is on this
            zero-based row

    Returns:
        LocatedDeclaration, or None if neither form matches
    """
    located = _find_by_kind(
        root, source, name,
        profile.function_kind, profile.function_name_kind, profile, row,
    )
    if located is None:
        logger.debug(f"No function named {name!r}, trying methods")
        located = _find_by_kind(
            root, source, name,
            profile.method_kind, profile.method_name_kind, profile, row,
        )
    return located


def find_namespace(root, source: bytes, profile: GrammarProfile) -> str:
    """Return the identifier of the first namespace clause, or "" if absent."""
    for node in walk(root):
        if node.type != profile.namespace_kind:
            continue
        for child in node.children:
            if child.type == profile.namespace_name_kind:
                return node_text(child, source)
    return ""
