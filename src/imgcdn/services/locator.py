"""Find image references in a parsed document."""

from dataclasses import dataclass, field
from enum import Enum

from bs4 import BeautifulSoup, Tag

from imgcdn.models.config import RewriteConfig
from imgcdn.services.tree import class_list, is_element


class ReferenceKind(str, Enum):
    """Shape of an image reference."""

    IMG = "img"
    PICTURE_SOURCE = "picture_source"
    BACKGROUND_STYLE = "background_style"


@dataclass
class ImageReference:
    """A candidate element found by the locator.

    The element is borrowed from the tree; the rewriter mutates it in place.
    """

    kind: ReferenceKind
    element: Tag
    classes: list[str] = field(default_factory=list)
    parent_classes: list[str] = field(default_factory=list)
    owner: Tag | None = None  # Enclosing <picture> for picture sources

    @property
    def source(self) -> str | None:
        value = self.element.get("src")
        return str(value) if value else None

    @property
    def srcset(self) -> str | None:
        value = self.element.get("srcset")
        return str(value) if value else None


def _kind_of(element: Tag) -> ReferenceKind | None:
    if element.name == "img":
        return ReferenceKind.IMG
    if element.name == "source" and is_element(element.parent) and element.parent.name == "picture":
        return ReferenceKind.PICTURE_SOURCE
    return None


def _has_background(element: Tag) -> bool:
    style = element.get("style")
    return bool(style) and "background" in str(style)


def is_skipped(element: Tag, config: RewriteConfig) -> bool:
    """Apply the ignore guards: the element's own classes, then its parent's."""
    skip = config.skip_classes
    if skip.intersection(class_list(element)):
        return True
    return bool(skip.intersection(class_list(element.parent)))


def locate(tree: BeautifulSoup, config: RewriteConfig) -> list[ImageReference]:
    """Collect every rewritable reference in document order.

    Collection happens before any mutation, so the guards see the document as
    it was handed in. An element can yield two references: one for its
    sources and one for its background style.
    """
    references: list[ImageReference] = []

    for element in tree.find_all(True):
        kind = _kind_of(element)
        background = _has_background(element)
        if kind is None and not background:
            continue
        if is_skipped(element, config):
            continue

        classes = class_list(element)
        parent_classes = class_list(element.parent)
        if kind is not None:
            owner = element.parent if kind is ReferenceKind.PICTURE_SOURCE else None
            references.append(ImageReference(kind, element, classes, parent_classes, owner))
        if background:
            references.append(ImageReference(ReferenceKind.BACKGROUND_STYLE, element, classes, parent_classes))

    return references
