"""HTTP responses.

``ResponseWriter`` is the request-scoped, mutable side: handlers and the
server dispatcher set status and headers on it, then write the body
through ASGI ``send()``. A handler may write and end the response
itself; ``headers_sent`` and ``writable_ended`` tell the dispatcher what
is left to do.

``Response`` is the immutable snapshot of a finished response, returned
by the test client.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from typing import Any

from schemarpc._internal.asgi import Send, response_body, response_start
from schemarpc.http.headers import Headers


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode(body: str | bytes) -> bytes:
    return body.encode("utf-8") if isinstance(body, str) else body


class ResponseWriter:
    """Mutable response bound to one ASGI ``send`` callable.

    Usage inside a handler that takes over the response::

        async def download(value, metadata, ctx):
            ctx.response.set_header("Content-Disposition", "attachment")
            await ctx.response.send(b"raw bytes", content_type="application/octet-stream")
    """

    __slots__ = ("_headers", "_send", "headers_sent", "status_code", "writable_ended")

    def __init__(self, send: Send) -> None:
        self._send = send
        self._headers: dict[str, tuple[str, str]] = {}
        self.status_code: int = 200
        self.headers_sent: bool = False
        self.writable_ended: bool = False

    def __repr__(self) -> str:
        return (
            f"ResponseWriter(status={self.status_code}, "
            f"headers_sent={self.headers_sent}, writable_ended={self.writable_ended})"
        )

    # -- Status and headers (before the response starts) --

    def set_status(self, status: int) -> ResponseWriter:
        """Set the status code. Chainable."""
        self._check_not_started("status")
        self.status_code = status
        return self

    def set_header(self, name: str, value: str) -> ResponseWriter:
        """Set (replace) a header. Chainable."""
        self._check_not_started("headers")
        self._headers[name.lower()] = (name, value)
        return self

    @property
    def headers(self) -> Headers:
        return Headers(self._headers.values())

    def _check_not_started(self, what: str) -> None:
        if self.headers_sent:
            msg = f"Cannot set {what} after the response has started"
            raise RuntimeError(msg)

    # -- Body --

    async def write(self, chunk: str | bytes) -> None:
        """Send headers if needed, then one body chunk; the response stays open."""
        if self.writable_ended:
            msg = "Cannot write after the response has ended"
            raise RuntimeError(msg)
        await self._start(content_length=None)
        data = _encode(chunk)
        if data and _body_allowed(self.status_code):
            await self._send(response_body(data, more_body=True))

    async def send(self, body: str | bytes = b"", *, content_type: str | None = None) -> None:
        """Write *body* and end the response."""
        if self.writable_ended:
            msg = "Response already ended"
            raise RuntimeError(msg)
        if content_type is not None and not self.headers_sent:
            self.set_header("Content-Type", content_type)
        data = _encode(body) if _body_allowed(self.status_code) else b""
        if not self.headers_sent:
            await self._start(content_length=len(data))
        await self._send(response_body(data))
        self.writable_ended = True

    async def json(self, data: Any, *, status: int | None = None) -> None:
        """Write *data* as a JSON body and end the response."""
        if status is not None:
            self.set_status(status)
        await self.send(json_module.dumps(data), content_type="application/json")

    async def end(self) -> None:
        """End the response with whatever has been written so far."""
        if self.writable_ended:
            return
        if not self.headers_sent:
            await self.send(b"")
            return
        await self._send(response_body(b""))
        self.writable_ended = True

    async def _start(self, *, content_length: int | None) -> None:
        if self.headers_sent:
            return
        raw = Headers(self._headers.values()).raw
        if content_length is not None:
            raw.append((b"content-length", str(content_length).encode("latin-1")))
        await self._send(response_start(self.status_code, raw))
        self.headers_sent = True


@dataclass(frozen=True, slots=True)
class Response:
    """An immutable, fully received HTTP response."""

    body: bytes = b""
    status: int = 200
    headers: Headers = field(default_factory=Headers)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Body parsed as JSON."""
        return json_module.loads(self.body)
