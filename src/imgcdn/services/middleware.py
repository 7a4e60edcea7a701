"""ASGI output filter that rewrites image references in HTML responses."""

import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from imgcdn.config import get_rewrite_config
from imgcdn.models.config import RewriteConfig
from imgcdn.services.rewriter import ImageRewriter

logger = logging.getLogger("imgcdn.middleware")


def _charset(content_type: bytes) -> str:
    """Extract the charset parameter of a content-type header, defaulting to UTF-8."""
    for param in content_type.decode("latin-1").split(";")[1:]:
        name, _, value = param.strip().partition("=")
        if name.lower() == "charset" and value:
            return value.strip().strip('"')
    return "utf-8"


class CdnRewriteMiddleware:
    """ASGI middleware that routes ``<img>`` and background images through the CDN.

    Buffers complete ``text/html`` bodies, rewrites them and fixes the
    ``content-length`` header. Everything else (non-HTML responses, websocket
    scopes, compressed bodies) passes through untouched.
    """

    def __init__(self, app: ASGIApp, config: RewriteConfig | None = None) -> None:
        self.app = app
        self._config = config
        self._rewriter: ImageRewriter | None = None

    @property
    def rewriter(self) -> ImageRewriter:
        if self._rewriter is None:
            self._rewriter = ImageRewriter(self._config or get_rewrite_config())
        return self._rewriter

    def rewrite_body(self, body: bytes, charset: str) -> bytes:
        """Rewrite a full HTML body, returning it unchanged if anything goes wrong."""
        try:
            html = body.decode(charset)
            return self.rewriter.rewrite(html).encode(charset)
        except Exception:
            # Don't let a rewrite failure take the response down with it
            logger.exception("Failed to rewrite HTML response, sending original body")
            return body

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.rewriter.config.is_enabled:
            await self.app(scope, receive, send)
            return

        # Buffer response headers so we can check content-type before sending
        is_html = False
        charset = "utf-8"
        original_status: int = 200
        original_headers: list[tuple[bytes, bytes]] = []
        body_chunks: list[bytes] = []

        async def send_wrapper(message: Message) -> None:
            nonlocal is_html, charset, original_status, original_headers

            if message["type"] == "http.response.start":
                original_status = message.get("status", 200)
                original_headers = list(message.get("headers", []))
                encoded = False
                for name, value in original_headers:
                    lowered = name.lower()
                    if lowered == b"content-type" and b"text/html" in value.lower():
                        is_html = True
                        charset = _charset(value)
                    elif lowered == b"content-encoding":
                        encoded = True
                # Compressed bodies can't be rewritten as text
                is_html = is_html and not encoded

                if not is_html:
                    await send(message)

            elif message["type"] == "http.response.body":
                if not is_html:
                    await send(message)
                    return

                body_chunks.append(message.get("body", b""))
                if message.get("more_body", False):
                    return

                full_body = self.rewrite_body(b"".join(body_chunks), charset)

                new_headers = [
                    (name, value) for name, value in original_headers if name.lower() != b"content-length"
                ]
                new_headers.append((b"content-length", str(len(full_body)).encode()))

                await send({"type": "http.response.start", "status": original_status, "headers": new_headers})
                await send({"type": "http.response.body", "body": full_body, "more_body": False})
            else:
                await send(message)

        await self.app(scope, receive, send_wrapper)
