"""Fetch capability — how the client dispatcher talks HTTP.

A fetch is any async callable ``(FetchRequest) -> FetchResponse``. The
default, ``HttpxFetch``, sends through ``httpx``; tests and in-process
callers point it at an ASGI app with ``HttpxFetch.for_app(app)``.

Interceptors observe every response before the client interprets it::

    async def refresh_on_401(event: Interception) -> None:
        if event.response.status == 401:
            await tokens.refresh()

    client = build_client(schema, entrypoint_url="...", interceptor=refresh_on_401)
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

import httpx

from schemarpc.http.headers import Headers

if TYPE_CHECKING:
    from schemarpc._internal.asgi import Receive, Scope, Send


@dataclass(frozen=True, slots=True)
class RequestInit:
    """Per-request options.

    Used both as the client-wide ``fetch_defaults`` and as the per-call
    ``init``. ``body`` is only sent when the call carries no input
    payload. ``ctx`` is handed to the interceptor untouched.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None
    fetch: Fetch | None = None
    skip_interceptor: bool = False
    ctx: Any = None
    timeout: float | None = None

    def merged(self, other: RequestInit | None) -> RequestInit:
        """Overlay *other* on this init; headers merge key-wise.

        Fields *other* leaves unset keep this init's value.
        """
        if other is None:
            return self
        return replace(
            other,
            headers=Headers.of(self.headers).merged(dict(other.headers)),
            body=other.body if other.body is not None else self.body,
            fetch=other.fetch or self.fetch,
            timeout=other.timeout if other.timeout is not None else self.timeout,
            skip_interceptor=other.skip_interceptor or self.skip_interceptor,
            ctx=other.ctx if other.ctx is not None else self.ctx,
        )


@dataclass(frozen=True, slots=True)
class FetchRequest:
    """A fully built outgoing request, as handed to a fetch."""

    method: str
    url: str
    headers: Headers
    body: bytes | None = None
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """A received response with its body already buffered."""

    status: int
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    status_text: str = ""

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    @property
    def reason(self) -> str:
        """``status_text`` if the server sent one, else the standard phrase."""
        if self.status_text:
            return self.status_text
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""

    def text(self) -> str:
        """Body as UTF-8; undecodable bytes become U+FFFD."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class Fetch(Protocol):
    """Sends one request and returns its response. No retries."""

    async def __call__(self, request: FetchRequest) -> FetchResponse: ...


@dataclass(frozen=True, slots=True)
class Interception:
    """What an interceptor sees for each response."""

    method: str
    path: str
    response: FetchResponse
    ctx: Any = None


Interceptor: TypeAlias = Callable[[Interception], Awaitable[None] | None]


class HttpxFetch:
    """Fetch backed by ``httpx.AsyncClient``.

    Without a client, each call opens and closes its own
    ``httpx.AsyncClient``. Pass a long-lived client to reuse connections;
    its lifecycle stays with the caller.
    """

    __slots__ = ("_client",)

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    def __repr__(self) -> str:
        return f"HttpxFetch(shared={self._client is not None})"

    @classmethod
    def for_app(
        cls,
        app: Callable[[Scope, Receive, Send], Awaitable[None]],
        base_url: str = "http://testserver",
    ) -> HttpxFetch:
        """Fetch that calls an ASGI app in process, without a socket."""
        transport = httpx.ASGITransport(app=app)
        return cls(httpx.AsyncClient(transport=transport, base_url=base_url))

    async def __call__(self, request: FetchRequest) -> FetchResponse:
        if self._client is not None:
            return await self._send(self._client, request)
        async with httpx.AsyncClient() as client:
            return await self._send(client, request)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    @staticmethod
    async def _send(client: httpx.AsyncClient, request: FetchRequest) -> FetchResponse:
        kwargs: dict[str, Any] = {}
        if request.timeout is not None:
            kwargs["timeout"] = request.timeout
        response = await client.request(
            request.method,
            request.url,
            headers=dict(request.headers.items()),
            content=request.body,
            **kwargs,
        )
        return FetchResponse(
            status=response.status_code,
            headers=Headers(response.headers.multi_items()),
            body=response.content,
            status_text=response.reason_phrase,
        )
