"""Inline style tokenizer.

Splits ``style`` attribute text into declarations on top-level ``;`` and then
on the first ``:``. Semicolons inside parentheses or quotes, such as the one
in ``url(data:image/png;base64,...)``, stay part of their declaration. Each
declaration keeps its raw text so callers can rewrite a single declaration
and join the list back without disturbing the rest.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Declaration:
    """A single ``property: value`` entry of an inline style."""

    raw: str
    name: str
    value: str

    @classmethod
    def from_raw(cls, raw: str) -> "Declaration":
        name, sep, value = raw.partition(":")
        if not sep:
            return cls(raw=raw, name="", value=raw.strip())
        return cls(raw=raw, name=name.strip().lower(), value=value.strip())

    def with_raw(self, raw: str) -> "Declaration":
        """Return a copy carrying rewritten raw text."""
        fresh = Declaration.from_raw(raw)
        return replace(self, raw=raw, value=fresh.value)


def unescape_quotes(style: str) -> str:
    """Undo backslash-escaped quote characters."""
    return style.replace('\\"', '"').replace("\\'", "'")


def split_top_level(style: str) -> list[str]:
    """Split on ``;`` that sit outside parentheses and quoted strings."""
    parts: list[str] = []
    start = 0
    depth = 0
    quote: str | None = None
    escaped = False

    for index, char in enumerate(style):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and not depth:
            parts.append(style[start:index])
            start = index + 1

    parts.append(style[start:])
    return parts


def parse_declarations(style: str) -> list[Declaration]:
    """Tokenize inline style text into declarations, empty segments included."""
    return [Declaration.from_raw(part) for part in split_top_level(style)]


def serialize_declarations(declarations: list[Declaration]) -> str:
    """Join declarations back into style text."""
    return ";".join(d.raw for d in declarations)
