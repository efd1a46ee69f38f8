from testctx.calls import extract_call_sites
from testctx.locator import find_declaration
from testctx.models import Position
from testctx.parsers.go_parser import GO_PROFILE, GoParser

from helpers import CALC_SOURCE


def _call_sites(text: str, function_name: str):
    source = text.encode("utf8")
    root = GoParser().parse(source).root_node
    located = find_declaration(root, source, function_name, GO_PROFILE)
    body = located.node.child_by_field_name("body")
    return extract_call_sites(body, source, GO_PROFILE)


def test_repeated_calls_are_deduplicated_in_first_seen_order():
    sites = _call_sites(
        "package main\n\nfunc f() {\n\tfoo()\n\tobj.bar()\n\tfoo()\n}\n",
        "f",
    )

    assert [s.name for s in sites] == ["foo", "obj.bar"]


def test_first_occurrence_position_is_kept():
    sites = _call_sites(
        "package main\n\nfunc f() {\n\tfoo()\n\tfoo()\n}\n",
        "f",
    )

    assert sites[0].position == Position(3, 1)


def test_member_call_points_at_member_identifier():
    sites = _call_sites("package main\n\nfunc f() {\n\tobj.bar()\n}\n", "f")

    assert sites[0].name == "obj.bar"
    # "\tobj.bar()": "bar" starts after the tab, "obj" and "."
    assert sites[0].position == Position(3, 5)


def test_chained_member_call_keeps_full_text():
    sites = _call_sites("package main\n\nfunc f() {\n\ta.b.c()\n}\n", "f")

    assert [s.name for s in sites] == ["a.b.c"]
    assert sites[0].position == Position(3, 5)


def test_nested_calls_follow_walk_order():
    sites = _call_sites("package main\n\nfunc f() {\n\touter(inner())\n}\n", "f")

    assert [s.name for s in sites] == ["outer", "inner"]


def test_calls_inside_function_literals_are_included():
    sites = _call_sites(
        "package main\n\nfunc f() {\n\tgo func() {\n\t\thelper()\n\t}()\n}\n",
        "f",
    )

    assert [s.name for s in sites] == ["helper"]


def test_unsupported_callee_shapes_are_ignored():
    sites = _call_sites(
        "package main\n\nfunc f() {\n\thandlers[0]()\n\tdone()\n}\n",
        "f",
    )

    assert [s.name for s in sites] == ["done"]


def test_calc_main_call_sites():
    sites = _call_sites(CALC_SOURCE, "main")

    assert [s.name for s in sites] == ["add", "fmt.Println", "m.Scale"]


def test_missing_body_yields_no_calls():
    assert extract_call_sites(None, b"", GO_PROFILE) == []
