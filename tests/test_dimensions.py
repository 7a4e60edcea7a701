"""Tests for dimension resolution."""

from bs4 import BeautifulSoup

from imgcdn.services.dimensions import (
    aspect_ratio,
    format_number,
    parse_length,
    resolve,
    resolve_height,
    resolve_width,
)


def element(html: str):
    """Parse a single element."""
    return BeautifulSoup(html, "html.parser").find(True)


class TestParseLength:
    """Tests for parse_length."""

    def test_plain_number(self):
        assert parse_length("100") == 100

    def test_pixel_suffix(self):
        assert parse_length("100px") == 100
        assert parse_length(" 12.5 px ") == 12.5

    def test_relative_units_rejected(self):
        """Relative units never count as pixel sizes."""
        for value in ["50%", "10em", "2rem", "3ex", "50vw", "50vh", "20ch"]:
            assert parse_length(value) is None, value

    def test_non_numeric_rejected(self):
        assert parse_length("auto") is None
        assert parse_length("") is None
        assert parse_length(None) is None

    def test_zero_rejected(self):
        """A zero size is treated as undeclared."""
        assert parse_length("0") is None
        assert parse_length("0px") is None


class TestResolve:
    """Tests for resolving width and height of an element."""

    def test_width_attribute(self):
        assert resolve_width(element('<img width="100">')) == 100

    def test_min_and_max_attributes(self):
        """min- and max- variants count when the plain attribute is missing."""
        assert resolve_width(element('<img min-width="80">')) == 80
        assert resolve_height(element('<img max-height="40">')) == 40

    def test_attribute_beats_style(self):
        assert resolve_width(element('<img width="100" style="width: 300px">')) == 100

    def test_style_width(self):
        assert resolve_width(element('<img style="border: 0; width: 120px">')) == 120

    def test_style_height_variant(self):
        assert resolve_height(element('<img style="max-height:30px">')) == 30

    def test_percent_width_is_none(self):
        """A percentage width is not a usable pixel width."""
        assert resolve_width(element('<img style="width: 50%">')) is None

    def test_relative_declaration_is_skipped(self):
        """Scanning continues past a relative declaration."""
        assert resolve_width(element('<img style="width: 10em; max-width: 80px">')) == 80

    def test_similar_property_names_ignored(self):
        """Only exact property names match."""
        assert resolve_width(element('<img style="border-width: 5px">')) is None
        assert resolve_height(element('<img style="line-height: 20px">')) is None

    def test_escaped_quotes_unescaped(self):
        """Backslash-escaped quotes in the style don't break tokenizing."""
        img = element("<img>")
        img["style"] = 'font-family: \\"Arial\\"; width: 40px'
        assert resolve_width(img) == 40

    def test_non_numeric_attribute_falls_through_to_style(self):
        assert resolve_width(element('<img width="auto" style="width: 64px">')) == 64

    def test_nothing_declared(self):
        img = element('<img src="a.jpg">')
        assert resolve(img, "width") is None
        assert resolve(img, "height") is None


def test_aspect_ratio():
    """Ratio is always longer side over shorter side."""
    assert aspect_ratio(100, 50) == 2.0
    assert aspect_ratio(50, 100) == 2.0
    assert aspect_ratio(None, 50) is None
    assert aspect_ratio(100, None) is None


def test_format_number():
    assert format_number(100) == "100"
    assert format_number(100.0) == "100"
    assert format_number(12.5) == "12.5"
