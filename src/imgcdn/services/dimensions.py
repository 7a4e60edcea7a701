"""Resolve the declared width and height of an element."""

import re
from typing import Literal

from bs4 import Tag

from imgcdn.services.styles import parse_declarations, unescape_quotes

Axis = Literal["width", "height"]
Number = int | float

RELATIVE_UNITS = ("em", "ex", "rem", "vw", "vh", "%", "ch")

NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def _variants(axis: Axis) -> tuple[str, str, str]:
    return (axis, f"min-{axis}", f"max-{axis}")


def parse_length(text: str | None) -> Number | None:
    """Parse a pixel length such as ``100``, ``100px`` or ``12.5 px``.

    Relative units, zero and anything non-numeric yield ``None``.
    """
    if not text:
        return None
    value = text.strip().lower()
    if value.endswith(RELATIVE_UNITS):
        return None
    if value.endswith("px"):
        value = value[:-2].rstrip()
    if not NUMBER_PATTERN.match(value):
        return None
    number = float(value)
    if number <= 0:
        return None
    return int(number) if number.is_integer() else number


def resolve(element: Tag, axis: Axis) -> Number | None:
    """Return the element's size along ``axis``, or None when it isn't declared.

    Attributes (``width``, ``min-width``, ``max-width``) take priority over the
    inline style. Within the style, the first declaration naming one of the
    same properties with a usable pixel value wins.
    """
    names = _variants(axis)

    for name in names:
        value = parse_length(element.get(name))  # type: ignore[arg-type]
        if value is not None:
            return value

    style = element.get("style")
    if not style:
        return None

    for declaration in parse_declarations(unescape_quotes(str(style))):
        if declaration.name not in names:
            continue
        value = parse_length(declaration.value)
        if value is not None:
            return value

    return None


def resolve_width(element: Tag) -> Number | None:
    return resolve(element, "width")


def resolve_height(element: Tag) -> Number | None:
    return resolve(element, "height")


def aspect_ratio(width: Number | None, height: Number | None) -> float | None:
    """Ratio of the longer side to the shorter one."""
    if not width or not height:
        return None
    return max(width, height) / min(width, height)


def format_number(value: Number) -> str:
    """Render a dimension for use inside a mutation token."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
