"""Rewrite HTML image references to resizing CDN URLs."""

from imgcdn.models.config import RewriteConfig
from imgcdn.services.rewriter import ImageRewriter, rewrite_images

__all__ = ["ImageRewriter", "RewriteConfig", "rewrite_images"]

__version__ = "0.1.0"
