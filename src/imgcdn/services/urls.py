"""CDN URL construction and signing."""

import hashlib
import hmac
import re
from urllib.parse import quote, quote_plus, unquote, urlsplit, urlunsplit

from imgcdn.models.config import RewriteConfig
from imgcdn.services.mutation import MutationDirective

DATA_URI_PATTERN = re.compile(r"^\s*data:", re.IGNORECASE)
SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)

# Sub-delimiters allowed unescaped inside a path segment (RFC 3986 pchar)
SEGMENT_SAFE = "!$&'()*+,;=:@"


def is_data_uri(source: str) -> bool:
    return bool(DATA_URI_PATTERN.match(source))


def is_bypassed(source: str) -> bool:
    """Sources that are never routed through the CDN: inline data and SVG."""
    return is_data_uri(source) or ".svg" in source


def encode_path(url: str) -> str:
    """Percent-encode the path of ``url`` one segment at a time.

    Segments are unquoted first, so an already-encoded ``%20`` stays ``%20``.
    """
    parts = urlsplit(url)
    segments = [quote(unquote(segment), safe=SEGMENT_SAFE) for segment in parts.path.split("/")]
    return urlunsplit(parts._replace(path="/".join(segments)))


def sign(payload: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``payload`` keyed with ``secret``."""
    return hmac.new(
        secret.encode(),
        payload.encode(),
        hashlib.sha256,
    ).hexdigest()


def _join(base: str, source: str) -> str:
    if not base:
        return source
    if base.endswith("/") and source.startswith("/"):
        return base + source[1:]
    if not base.endswith("/") and not source.startswith("/"):
        return f"{base}/{source}"
    return base + source


class CdnUrlBuilder:
    """Builds signed CDN URLs for a fixed configuration."""

    def __init__(self, config: RewriteConfig) -> None:
        self.config = config
        self.template = config.url_template

    def absolute_source(self, raw: str) -> str:
        """Resolve ``raw`` against the base path and encode its path segments."""
        source = raw.strip()
        base = self.config.base_path
        if not source.startswith(base):
            if source.startswith("//"):
                source = f"https:{source}"
            elif not SCHEME_PATTERN.match(source):
                source = _join(base, source)
        return encode_path(source)

    def encode_source(self, raw: str) -> str:
        """The value placed in the ``src`` query parameter."""
        return quote_plus(self.absolute_source(raw), safe="")

    def signature_suffix(self, encoded: str) -> str:
        if self.config.secret is None:
            return ""
        return f"&sig={sign(encoded, self.config.secret)}"

    def build(self, raw: str, mutation: MutationDirective | None = None) -> str:
        """Return the CDN URL serving ``raw`` with the given mutation."""
        encoded = self.encode_source(raw)
        url = self.template.format(mutation=mutation or MutationDirective(), source=encoded)
        return url + self.signature_suffix(encoded)
