"""Tests for schemarpc.http.request — immutable Request with cached body."""

from typing import Any

import pytest

from schemarpc.http.request import Request


def _make_receive(*chunks: bytes) -> Any:
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]
    calls = {"n": 0}

    async def receive() -> dict[str, Any]:
        calls["n"] += 1
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    receive.calls = calls  # type: ignore[attr-defined]
    return receive


def _make_request(receive: Any = None, **overrides: Any) -> Request:
    scope: dict[str, Any] = {
        "type": "http",
        "method": "post",
        "path": "/users",
        "query_string": b"__body=%5B1%5D",
        "headers": [(b"content-type", b"application/json"), (b"content-length", b"7")],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 1234),
    }
    scope.update(overrides)
    return Request.from_asgi(scope, receive or _make_receive(b""))


class TestFromAsgi:
    def test_metadata(self) -> None:
        request = _make_request()
        assert request.method == "POST"
        assert request.path == "/users"
        assert request.query["__body"] == "[1]"
        assert request.content_type == "application/json"
        assert request.content_length == 7
        assert request.server == ("testserver", 80)
        assert request.url == "/users?__body=%5B1%5D"

    def test_bad_content_length(self) -> None:
        request = _make_request(headers=[(b"content-length", b"lots")])
        assert request.content_length is None


class TestBody:
    @pytest.mark.asyncio
    async def test_chunks_joined(self) -> None:
        request = _make_request(_make_receive(b'{"a":', b"1}"))
        assert await request.body() == b'{"a":1}'
        assert await request.json() == {"a": 1}

    @pytest.mark.asyncio
    async def test_body_read_once(self) -> None:
        receive = _make_receive(b"hello")
        request = _make_request(receive)
        assert await request.text() == "hello"
        assert await request.text() == "hello"
        assert receive.calls["n"] == 1

    @pytest.mark.asyncio
    async def test_text_after_body_reuses_bytes(self) -> None:
        receive = _make_receive(b"hi")
        request = _make_request(receive)
        await request.body()
        assert await request.text() == "hi"
        assert receive.calls["n"] == 1

    @pytest.mark.asyncio
    async def test_invalid_utf8_raises(self) -> None:
        request = _make_request(_make_receive(b"\xff\xfe"))
        with pytest.raises(UnicodeDecodeError):
            await request.text()

    @pytest.mark.asyncio
    async def test_disconnect_ends_stream(self) -> None:
        request = _make_request(_make_receive())
        assert await request.body() == b""
