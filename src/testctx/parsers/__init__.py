from pathlib import Path

from testctx.parsers.base import BaseParser, GrammarProfile, node_text
from testctx.parsers.go_parser import GO_PROFILE, GoParser

__all__ = [
    "BaseParser",
    "GO_PROFILE",
    "GoParser",
    "GrammarProfile",
    "get_parser_for_file",
    "node_text",
]


def get_parser_for_file(file_path: Path) -> BaseParser | None:
    """Return a parser for the file's language, or None if unsupported."""
    if file_path.suffix.lower() == ".go":
        return GoParser()
    return None
