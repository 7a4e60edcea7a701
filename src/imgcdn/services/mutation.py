"""Mutation directives: the transformation part of a CDN URL."""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from imgcdn.services.dimensions import Number, aspect_ratio, format_number

AUTO = "auto"

DESCRIPTOR_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([wx])$", re.IGNORECASE)


@dataclass(frozen=True)
class MutationDirective:
    """Ordered transformation tokens, always terminated by ``auto``."""

    tokens: tuple[str, ...] = (AUTO,)

    def __post_init__(self) -> None:
        tokens = tuple(token.strip() for token in self.tokens if token and token.strip())
        if not tokens or tokens[-1] != AUTO:
            tokens = (*tokens, AUTO)
        object.__setattr__(self, "tokens", tokens)

    def __str__(self) -> str:
        return ",".join(self.tokens)


# A rule receives (width, height, fill) as rendered strings and returns tokens,
# or None when it does not apply. First match wins.
Rule = Callable[[str | None, str | None, bool], list[str] | None]


def _height_only(w: str | None, h: str | None, fill: bool) -> list[str] | None:
    if h and not w:
        return [f"resize_x{h}shrink"]
    return None


def _width_only(w: str | None, h: str | None, fill: bool) -> list[str] | None:
    if w and not h:
        return [f"resize_{w}shrink"]
    return None


def _fill_box(w: str | None, h: str | None, fill: bool) -> list[str] | None:
    if w and h and fill:
        box = f"{w}x{h}"
        return [f"resize_{box}", f"crop_{box}", "pos_center", f"fill_{box}", "bg_transparent"]
    return None


def _fit_box(w: str | None, h: str | None, fill: bool) -> list[str] | None:
    if w and h:
        return [f"fit_{w}x{h}"]
    return None


RULES: tuple[Rule, ...] = (_height_only, _width_only, _fill_box, _fit_box)


def build_mutation(
    width: Number | None,
    height: Number | None,
    fill: bool = False,
    custom_tokens: Sequence[str] = (),
) -> MutationDirective:
    """Pick the transformation for an element.

    Custom tokens from configured classes override everything. Otherwise the
    declared dimensions decide between shrink-resize, fill-crop and fit, and
    an element without dimensions gets the bare ``auto`` directive.
    """
    if custom_tokens:
        return MutationDirective((*custom_tokens, AUTO))

    w = format_number(width) if width else None
    h = format_number(height) if height else None
    for rule in RULES:
        tokens = rule(w, h, fill)
        if tokens is not None:
            return MutationDirective(tuple(tokens))
    return MutationDirective()


def parse_descriptor(descriptor: str) -> tuple[Number, str] | None:
    """Split a source-set descriptor such as ``300w`` or ``2x`` into value and unit."""
    match = DESCRIPTOR_PATTERN.match(descriptor.strip())
    if not match:
        return None
    value = float(match.group(1))
    return (int(value) if value.is_integer() else value), match.group(2).lower()


def build_source_set_mutation(
    descriptor: str,
    custom_tokens: Sequence[str] = (),
    box: tuple[Number, Number] | None = None,
) -> MutationDirective:
    """Mutation for one entry of a responsive source set.

    A pixel-width descriptor adds a ``resize_`` token ahead of any custom
    tokens. When ``box`` (the element's width and height) is given, the
    resize keeps that aspect ratio. Density descriptors add nothing.
    """
    parsed = parse_descriptor(descriptor)
    tokens: list[str] = []
    if parsed is not None and parsed[1] == "w":
        pixel_width = parsed[0]
        token = f"resize_{format_number(pixel_width)}"
        if box is not None:
            box_width, box_height = box
            ratio = aspect_ratio(box_width, box_height)
            if ratio is not None:
                scaled = pixel_width / ratio if box_width >= box_height else pixel_width * ratio
                token += f"x{round(scaled)}"
        tokens.append(token)
    tokens.extend(custom_tokens)
    return MutationDirective((*tokens, AUTO))
