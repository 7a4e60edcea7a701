"""Lenient HTML parsing and serialization backed by BeautifulSoup."""

import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, Tag, UnicodeDammit

BYTE_ORDER_MARK = "\ufeff"

# The stdlib-backed builder does not invent <html>/<body> wrappers, so a
# fragment in is a fragment out.
PARSER = "html.parser"


def normalize(html: str | bytes) -> str:
    """Decode raw input to text and drop a leading byte-order mark."""
    if isinstance(html, bytes):
        html = UnicodeDammit(html, ["utf-8"]).unicode_markup or ""
    if html.startswith(BYTE_ORDER_MARK):
        html = html[len(BYTE_ORDER_MARK) :]
    return html


def parse(html: str) -> BeautifulSoup:
    """Parse markup into a mutable tree without raising on malformed input."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(html, PARSER)


def serialize(tree: BeautifulSoup) -> str:
    """Render the tree back to markup."""
    return tree.decode()


def has_markup(tree: BeautifulSoup) -> bool:
    """Check whether the parse produced at least one element."""
    return tree.find(True) is not None


def is_element(node: object) -> bool:
    """True for element nodes, false for the document root and text nodes."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def class_list(node: object) -> list[str]:
    """Return the class names of an element node, or an empty list."""
    if not is_element(node):
        return []
    value = node.get("class")  # type: ignore[union-attr]
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def add_class(element: Tag, name: str) -> None:
    """Append a class name, keeping existing order and dropping duplicates."""
    classes = list(dict.fromkeys([*class_list(element), name]))
    element["class"] = classes
