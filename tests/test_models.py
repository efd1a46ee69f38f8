import pytest

from testctx.models import (
    EMPTY_RANGE,
    ContextBundle,
    DeclarationMatch,
    Position,
    Range,
)


def test_position_is_immutable():
    position = Position(1, 2)

    with pytest.raises(AttributeError):
        position.row = 3


def test_range_rejects_inverted_rows():
    with pytest.raises(ValueError):
        Range(Position(5, 0), Position(4, 0))


def test_single_row_range_is_allowed():
    rng = Range(Position(4, 0), Position(4, 10))

    assert not rng.is_empty


def test_empty_range():
    assert EMPTY_RANGE.is_empty
    assert Range(Position(0, 0), Position(0, 0)).is_empty


def test_render_without_comment_has_no_leading_newline():
    match = DeclarationMatch(name="f", body_text="func f() {}")

    assert match.render() == "func f() {}"


def test_render_with_comment():
    match = DeclarationMatch(name="f", body_text="func f() {}", comment="// f does it")

    assert match.render() == "// f does it\nfunc f() {}"


def test_render_ignores_whitespace_only_comment():
    match = DeclarationMatch(name="f", body_text="func f() {}", comment="  ")

    assert match.render() == "func f() {}"


def test_bundle_defaults_are_independent():
    target = DeclarationMatch(name="f", body_text="func f() {}")
    first = ContextBundle(namespace="a", target=target)
    second = ContextBundle(namespace="b", target=target)

    first.dependencies.append("x")

    assert second.dependencies == []
