"""Rewrite image references in HTML so they are served through the CDN.

One pass over a document: locate candidate elements, resolve their declared
box, pick a mutation, build the CDN URL and write it back. Every element that
was rewritten gets the initialized class, which the locator treats as an
ignore marker, so running the pass again on its own output changes nothing.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import Tag

from imgcdn.models.config import RewriteConfig
from imgcdn.services.dimensions import Number, resolve_height, resolve_width
from imgcdn.services.locator import ImageReference, ReferenceKind, locate
from imgcdn.services.mutation import (
    MutationDirective,
    build_mutation,
    build_source_set_mutation,
    parse_descriptor,
)
from imgcdn.services.styles import parse_declarations, serialize_declarations
from imgcdn.services.tree import add_class, has_markup, normalize, parse, serialize
from imgcdn.services.urls import CdnUrlBuilder, is_bypassed

logger = logging.getLogger("imgcdn.rewriter")

SRC = "src"
SRCSET = "srcset"
LOADING = "loading"

SOURCE_SET_SEPARATOR = ", "
SOURCE_SET_SPLIT = re.compile(r",\s+")

BACKGROUND_PROPERTIES = ("background", "background-image")
CSS_URL_PATTERN = re.compile(r"""url\(\s*(['"]?)(.*?)\1\s*\)""", re.IGNORECASE)


@dataclass
class SourceSetEntry:
    """One ``<url> <descriptor>`` pair of a responsive source set."""

    url: str
    descriptor: str = ""

    @classmethod
    def parse(cls, entry: str) -> "SourceSetEntry":
        url, _, descriptor = entry.strip().partition(" ")
        return cls(url=url, descriptor=descriptor.strip())

    def __str__(self) -> str:
        if self.descriptor:
            return f"{self.url} {self.descriptor}"
        return self.url


def split_source_set(value: str) -> list[str]:
    return [entry for entry in SOURCE_SET_SPLIT.split(value.strip()) if entry]


def is_source_set(value: str) -> bool:
    """A value is a responsive set when it has several entries or a trailing descriptor."""
    entries = split_source_set(value)
    if len(entries) > 1:
        return True
    if not entries:
        return False
    return parse_descriptor(SourceSetEntry.parse(entries[0]).descriptor) is not None


@dataclass
class RewriteResult:
    """Outcome of one pass over a document."""

    html: str
    rewritten: int = 0  # Elements that received at least one CDN URL
    untouched: int = 0  # Candidates whose sources were all bypassed or missing


class ImageRewriter:
    """Rewrites image references for one configuration."""

    def __init__(self, config: RewriteConfig) -> None:
        self.config = config
        self.urls = CdnUrlBuilder(config)

    def rewrite(self, html: str | bytes | None) -> str:
        """Return ``html`` with image sources pointing at the CDN."""
        return self.rewrite_with_stats(html).html

    def rewrite_with_stats(self, html: str | bytes | None) -> RewriteResult:
        if not html:
            return RewriteResult(html="")
        text = normalize(html)
        if not text.strip():
            return RewriteResult(html="")

        tree = parse(text)
        if not has_markup(tree):
            return RewriteResult(html=text)

        result = RewriteResult(html="")
        pictures: dict[int, Tag] = {}

        for reference in locate(tree, self.config):
            if reference.kind is ReferenceKind.BACKGROUND_STYLE:
                changed = self._rewrite_background(reference)
            else:
                changed = self._rewrite_sources(reference)
            if reference.owner is not None:
                pictures[id(reference.owner)] = reference.owner

            if changed:
                result.rewritten += 1
            else:
                result.untouched += 1

        # A picture is done once all of its sources have been handled
        for picture in pictures.values():
            add_class(picture, self.config.initialized_class)

        result.html = serialize(tree)
        logger.debug(
            "Rewrote %d image references (%d untouched, %d pictures)",
            result.rewritten,
            result.untouched,
            len(pictures),
        )
        return result

    def _cdn_url(self, raw: str, mutation: MutationDirective) -> str | None:
        """CDN URL for ``raw``, or None when the source must stay as it is."""
        if not raw.strip() or is_bypassed(raw):
            return None
        return self.urls.build(raw, mutation)

    def _rewrite_source_set(
        self,
        value: str,
        custom_tokens: Sequence[str],
        box: tuple[Number, Number] | None,
    ) -> str | None:
        changed = False
        rebuilt: list[str] = []
        for raw_entry in split_source_set(value):
            entry = SourceSetEntry.parse(raw_entry)
            mutation = build_source_set_mutation(entry.descriptor, custom_tokens, box)
            url = self._cdn_url(entry.url, mutation)
            if url is None:
                rebuilt.append(raw_entry)
                continue
            rebuilt.append(str(SourceSetEntry(url, entry.descriptor)))
            changed = True
        if not changed:
            return None
        return SOURCE_SET_SEPARATOR.join(rebuilt)

    def _rewrite_sources(self, reference: ImageReference) -> bool:
        element = reference.element
        config = self.config

        width = resolve_width(element)
        height = resolve_height(element)
        fill = config.fill_class in reference.classes or config.fill_class in reference.parent_classes
        custom_tokens = config.custom_tokens(reference.classes)
        mutation = build_mutation(width, height, fill, custom_tokens)
        box = (width, height) if config.preserve_srcset_ratio and width and height else None

        changed = False

        if reference.source:
            url = self._cdn_url(reference.source, mutation)
            if url is not None:
                element[SRC] = url
                changed = True

        if reference.srcset:
            srcset = self._rewrite_source_set(reference.srcset, custom_tokens, box)
            if srcset is not None:
                element[SRCSET] = srcset
                changed = True

        for name in config.lazy_attributes:
            value = element.get(name)
            if not value:
                continue
            value = str(value)
            if is_source_set(value):
                rewritten = self._rewrite_source_set(value, custom_tokens, box)
            else:
                rewritten = self._cdn_url(value, mutation)
            if rewritten is not None:
                element[name] = rewritten
                changed = True

        if not changed:
            return False

        if not element.has_attr(LOADING):
            element[LOADING] = config.loading
        add_class(element, config.initialized_class)
        return True

    def _replace_css_url(self, match: re.Match[str]) -> str:
        url = self._cdn_url(match.group(2).strip(), MutationDirective())
        if url is None:
            return match.group(0)
        # Splice by position: the argument text may also occur inside "url("
        start, end = match.start(2) - match.start(), match.end(2) - match.start()
        text = match.group(0)
        return text[:start] + url + text[end:]

    def _rewrite_background(self, reference: ImageReference) -> bool:
        element = reference.element
        declarations = parse_declarations(str(element.get("style", "")))

        changed = False
        for index, declaration in enumerate(declarations):
            if declaration.name not in BACKGROUND_PROPERTIES:
                continue
            raw = CSS_URL_PATTERN.sub(self._replace_css_url, declaration.raw)
            if raw != declaration.raw:
                declarations[index] = declaration.with_raw(raw)
                changed = True

        if not changed:
            return False

        element["style"] = serialize_declarations(declarations)
        add_class(element, self.config.initialized_class)
        return True


def rewrite_images(html: str | bytes | None, config: RewriteConfig) -> str:
    """Rewrite every image reference in ``html`` for ``config``."""
    return ImageRewriter(config).rewrite(html)
