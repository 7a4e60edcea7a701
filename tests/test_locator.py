"""Tests for the image reference locator."""

import pytest

from imgcdn.models.config import RewriteConfig
from imgcdn.services.locator import ReferenceKind, is_skipped, locate
from imgcdn.services.tree import parse


@pytest.fixture
def config():
    """Configuration with one extra ignored class."""
    return RewriteConfig(storage_id="store", ignored_classes={"no-cdn"})


def kinds(html: str, config: RewriteConfig) -> list[ReferenceKind]:
    return [ref.kind for ref in locate(parse(html), config)]


class TestLocate:
    """Tests for finding candidate elements."""

    def test_finds_images_in_document_order(self, config):
        """Images are returned in the order they appear."""
        html = '<img src="a.jpg"><p><img src="b.jpg"></p>'
        refs = locate(parse(html), config)
        assert [ref.source for ref in refs] == ["a.jpg", "b.jpg"]
        assert all(ref.kind is ReferenceKind.IMG for ref in refs)

    def test_picture_sources(self, config):
        """Direct source children of picture are responsive candidates."""
        html = '<picture><source srcset="a.webp 1x"><img src="a.jpg"></picture>'
        refs = locate(parse(html), config)
        assert [ref.kind for ref in refs] == [ReferenceKind.PICTURE_SOURCE, ReferenceKind.IMG]
        assert refs[0].owner is not None and refs[0].owner.name == "picture"
        assert refs[0].srcset == "a.webp 1x"
        assert refs[1].owner is None

    def test_source_outside_picture_ignored(self, config):
        """Media sources are not image candidates."""
        html = '<video><source src="movie.mp4"></video><audio><source src="a.mp3"></audio>'
        assert kinds(html, config) == []

    def test_background_style(self, config):
        """Only styles with a background declaration are candidates."""
        html = "<div style=\"background: url('a.png')\"></div><div style=\"color: red\"></div>"
        assert kinds(html, config) == [ReferenceKind.BACKGROUND_STYLE]

    def test_img_with_background_yields_both(self, config):
        """An image with a background style is located twice."""
        html = "<img src=\"a.jpg\" style=\"background-image: url('b.png')\">"
        assert kinds(html, config) == [ReferenceKind.IMG, ReferenceKind.BACKGROUND_STYLE]

    def test_classes_captured(self, config):
        """Own and parent classes are recorded on the reference."""
        html = '<div class="fj-fill box"><img class="thumb" src="a.jpg"></div>'
        ref = locate(parse(html), config)[0]
        assert ref.classes == ["thumb"]
        assert ref.parent_classes == ["fj-fill", "box"]

    def test_top_level_element_has_no_parent_classes(self, config):
        """A root-level element has no parent classes."""
        ref = locate(parse('<img src="a.jpg">'), config)[0]
        assert ref.parent_classes == []


class TestIgnoreGuards:
    """Tests for the ignore rules."""

    def test_builtin_ignore_class(self, config):
        """The ignore class skips the element."""
        assert kinds('<img class="fj-ignore" src="a.jpg">', config) == []

    def test_configured_ignore_class(self, config):
        """Configured ignored classes skip the element."""
        assert kinds('<img class="x no-cdn" src="a.jpg">', config) == []

    def test_initialized_class(self, config):
        """Already rewritten elements are skipped."""
        assert kinds('<img class="fj-initialized" src="a.jpg">', config) == []

    def test_ignored_parent(self, config):
        """An ignored parent skips its children."""
        assert kinds('<span class="fj-ignore"><img src="a.jpg"></span>', config) == []

    def test_grandparent_not_checked(self, config):
        """Only the direct parent is consulted."""
        html = '<div class="fj-ignore"><span><img src="a.jpg"></span></div>'
        assert kinds(html, config) == [ReferenceKind.IMG]

    def test_initialized_picture_skips_sources(self, config):
        """An initialized picture skips its sources and image."""
        html = '<picture class="fj-initialized"><source srcset="a.webp"><img src="a.jpg"></picture>'
        assert kinds(html, config) == []

    def test_is_skipped_custom_initialized_class(self):
        """A custom initialized class is honoured."""
        config = RewriteConfig(storage_id="store", initialized_class="done")
        tree = parse('<img class="done" src="a.jpg">')
        assert is_skipped(tree.img, config) is True
