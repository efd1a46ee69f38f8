from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GrammarProfile:
    """Node kinds and field names the engine needs from a grammar.

    Keeping these as data means a new language only needs a new profile and a
    parser that produces trees with these kinds.
    """
    function_kind: str
    function_name_kind: str
    method_kind: str
    method_name_kind: str
    name_field: str
    body_field: str
    comment_kind: str
    call_kind: str
    callee_field: str
    identifier_kind: str
    member_kind: str
    member_field: str
    namespace_kind: str
    namespace_name_kind: str
    comment_prefix: str


def node_text(node, source: bytes) -> str:
    """Return the source text covered by a node."""
    return source[node.start_byte:node.end_byte].decode("utf8", errors="replace")


class BaseParser(ABC):
    """Abstract base class for language-specific syntax tree providers."""

    profile: GrammarProfile

    @abstractmethod
    def parse(self, source: bytes):
        """Parse raw source bytes into a syntax tree.

        Args:
            source: The source code to parse

        Returns:
            tree-sitter Tree whose root_node is the file node

        Raises:
            ParseError: If no tree could be produced
        """
        pass
