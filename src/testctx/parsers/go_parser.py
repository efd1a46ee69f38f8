import tree_sitter_go
from tree_sitter import Language, Parser

from testctx.errors import ParseError
from testctx.parsers.base import BaseParser, GrammarProfile

GO_PROFILE = GrammarProfile(
    function_kind="function_declaration",
    function_name_kind="identifier",
    method_kind="method_declaration",
    method_name_kind="field_identifier",
    name_field="name",
    body_field="body",
    comment_kind="comment",
    call_kind="call_expression",
    callee_field="function",
    identifier_kind="identifier",
    member_kind="selector_expression",
    member_field="field",
    namespace_kind="package_clause",
    namespace_name_kind="package_identifier",
    comment_prefix="//",
)


class GoParser(BaseParser):
    """Syntax tree provider for Go source code using tree-sitter."""

    profile = GO_PROFILE

    def __init__(self):
        self.language = Language(tree_sitter_go.language())
        self.parser = Parser(self.language)

    def parse(self, source: bytes):
        """Parse Go source bytes.

        Args:
            source: Go source code as bytes

        Returns:
            tree-sitter Tree

        Raises:
            ParseError: If tree-sitter returns no tree
        """
        try:
            tree = self.parser.parse(source)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Could not parse code: {e}") from e
        if tree is None:
            raise ParseError("Could not parse code: tree is None")
        return tree
