"""Tests for the inline style tokenizer."""

from imgcdn.services.styles import (
    Declaration,
    parse_declarations,
    serialize_declarations,
    split_top_level,
    unescape_quotes,
)


def test_parse_declarations():
    """Declarations split on semicolons, then on the first colon."""
    declarations = parse_declarations("Width: 10px; background: url(http://x/a.png)")
    assert [d.name for d in declarations] == ["width", "background"]
    assert declarations[1].value == "url(http://x/a.png)"


def test_serialize_preserves_text():
    """Unchanged declarations serialize back to the original text."""
    style = "width: 10px;  background : red ;"
    assert serialize_declarations(parse_declarations(style)) == style


def test_declaration_without_colon():
    """A segment without a colon has no property name."""
    declaration = Declaration.from_raw(" garbage ")
    assert declaration.name == ""
    assert declaration.value == "garbage"


def test_with_raw_updates_value():
    """Rewriting a declaration's raw text refreshes its value."""
    declaration = Declaration.from_raw("background: url(a.png)")
    rewritten = declaration.with_raw("background: url(b.png)")
    assert rewritten.name == "background"
    assert rewritten.value == "url(b.png)"
    assert rewritten.raw == "background: url(b.png)"


def test_unescape_quotes():
    """Backslash-escaped quotes are unescaped."""
    assert unescape_quotes("url(\\'a.png\\') \\\"x\\\"") == "url('a.png') \"x\""


def test_semicolon_inside_url_kept():
    """Semicolons inside url(...) don't split the declaration."""
    style = "background-image: url(data:image/png;base64,AAA), url(/b.png); width: 10px"
    declarations = parse_declarations(style)
    assert [d.name for d in declarations] == ["background-image", "width"]
    assert declarations[0].value == "url(data:image/png;base64,AAA), url(/b.png)"
    assert serialize_declarations(declarations) == style


def test_semicolon_inside_quotes_kept():
    """Semicolons inside quoted strings don't split."""
    declarations = parse_declarations("content: 'a;b'; color: red")
    assert [d.name for d in declarations] == ["content", "color"]


def test_split_top_level():
    """Only top-level semicolons split, trailing ones leave an empty part."""
    assert split_top_level("a: 1;b: url(x;y);") == ["a: 1", "b: url(x;y)", ""]
