import pytest

from testctx.errors import ParseError
from testctx.parsers.base import node_text
from testctx.parsers.go_parser import GO_PROFILE, GoParser


def test_parse_returns_source_file_root():
    parser = GoParser()

    tree = parser.parse(b"package main\n\nfunc main() {}\n")

    assert tree.root_node.type == "source_file"


def test_parse_exposes_declaration_fields():
    source = b"package main\n\nfunc greet(name string) string { return name }\n"
    parser = GoParser()

    tree = parser.parse(source)
    declaration = [c for c in tree.root_node.children if c.type == GO_PROFILE.function_kind][0]
    name_node = declaration.child_by_field_name(GO_PROFILE.name_field)

    assert node_text(name_node, source) == "greet"
    assert declaration.child_by_field_name(GO_PROFILE.body_field) is not None


def test_parse_rejects_non_bytes_input():
    parser = GoParser()

    with pytest.raises(ParseError):
        parser.parse(12345)


def test_node_text_handles_multibyte_characters():
    source = 'package main\n\nvar s = "héllo"\n'.encode("utf8")
    parser = GoParser()

    tree = parser.parse(source)

    assert "héllo" in node_text(tree.root_node, source)


def test_go_profile_uses_line_comments():
    assert GoParser.profile is GO_PROFILE
    assert GO_PROFILE.comment_prefix == "//"
