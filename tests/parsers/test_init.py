from pathlib import Path

from testctx.parsers import get_parser_for_file
from testctx.parsers.go_parser import GoParser


def test_get_parser_for_go_file():
    parser = get_parser_for_file(Path("main.go"))

    assert parser is not None
    assert isinstance(parser, GoParser)


def test_get_parser_for_uppercase_extension():
    parser = get_parser_for_file(Path("main.GO"))

    assert parser is not None
    assert isinstance(parser, GoParser)


def test_get_parser_for_unsupported_file():
    parser = get_parser_for_file(Path("notes.txt"))

    assert parser is None


def test_get_parser_for_python_file():
    parser = get_parser_for_file(Path("module.py"))

    # Python has no oracle wired up
    assert parser is None
