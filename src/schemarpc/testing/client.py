"""Async test client for schemarpc servers.

Sends requests through the ASGI interface directly, with no socket, and
returns an immutable ``Response``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from schemarpc._internal.asgi import Receive, Scope, Send
from schemarpc.http.headers import Headers
from schemarpc.http.query import build_query
from schemarpc.http.response import Response

ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]


class TestClient:
    """Async test client for any ASGI app, ``RPCServer`` included.

    Usage::

        async with TestClient(server) as client:
            response = await client.get("/users", query={"__body": '{"id":1}'})
            assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class
    __slots__ = ("app",)

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
    ) -> Response:
        """Send a GET request; *query* is percent-encoded onto the path."""
        if query:
            path = f"{path}?{build_query(query)}"
        return await self.request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST request."""
        return await self._with_body("POST", path, headers, body, json)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PUT request."""
        return await self._with_body("PUT", path, headers, body, json)

    async def patch(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PATCH request."""
        return await self._with_body("PATCH", path, headers, body, json)

    async def delete(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
        json: Any = None,
    ) -> Response:
        """Send a DELETE request."""
        return await self._with_body("DELETE", path, headers, body, json)

    async def _with_body(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None,
        body: bytes | str | None,
        json: Any,
    ) -> Response:
        extra_headers: dict[str, str] = {}
        if json is not None:
            body = json_module.dumps(json)
            extra_headers["content-type"] = "application/json"
        if isinstance(body, str):
            body = body.encode("utf-8")
        merged = {**extra_headers, **(headers or {})}
        return await self.request(method, path, headers=merged, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            headers=Headers.from_asgi(response_headers),
        )
