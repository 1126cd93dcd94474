"""Client dispatcher — turns a schema into awaitable endpoint callers.

Every endpoint in the schema becomes an ``EndpointCaller`` reachable by
the schema's own keys::

    client = build_client(schema, entrypoint_url="https://api.example.com/rpc")
    user = await client.users.get({"id": 1})
    await client.users.profile.post(profile)

A namespace member can also be reached by any spelling that normalizes to
the same path segment, so ``client.user_profile`` finds key ``userProfile``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import replace
from typing import Any, Final

from schemarpc._internal.invoke import invoke
from schemarpc.config import ClientConfig
from schemarpc.errors import ConfigurationError, InvalidArgument, TransportError
from schemarpc.fetch import FetchRequest, FetchResponse, Interception, RequestInit
from schemarpc.http.headers import Headers
from schemarpc.http.query import BODY_PARAM, build_query
from schemarpc.naming import normalize
from schemarpc.schema import Endpoint, Node, Route, Subtree, as_node, build_path

logger = logging.getLogger("schemarpc.client")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Final = _Missing()


class EndpointCaller:
    """Performs one verb at one path.

    Endpoints declared with ``input=None`` are called as
    ``await caller(init=None)`` or ``await caller(init)``; every other
    endpoint as ``await caller(value, init=None)``.
    """

    __slots__ = ("_config", "_logger", "endpoint", "method", "path")

    def __init__(self, path: str, method: str, endpoint: Endpoint, config: ClientConfig) -> None:
        self.path = path
        self.method = method
        self.endpoint = endpoint
        self._config = config
        self._logger = config.logger or logger

    def __repr__(self) -> str:
        return f"EndpointCaller({self.method.upper()} {self.path or '/'})"

    async def __call__(self, value: Any = _MISSING, /, init: RequestInit | None = None) -> Any:
        endpoint = self.endpoint
        if not endpoint.takes_input and isinstance(value, RequestInit) and init is None:
            value, init = _MISSING, value
        if not endpoint.takes_input and value is not _MISSING:
            msg = f"{self.method.upper()} {self.path or '/'} takes no input; pass options as init="
            raise TypeError(msg)
        if endpoint.requires_input and (value is _MISSING or value is None):
            msg = f"Input data argument not provided for {self.method.upper()} {self.path or '/'}"
            raise InvalidArgument(msg)

        options = self._config.fetch_defaults.merged(init)
        request = self._build_request(value, options)
        fetch = options.fetch or self._config.fetch

        self._logger.debug("Performing %s %s", request.method, self.path or "/")
        response = await fetch(request)

        interceptor = self._config.interceptor
        if interceptor is not None and not options.skip_interceptor:
            await invoke(
                interceptor,
                Interception(method=self.method, path=self.path, response=response, ctx=options.ctx),
            )

        return self._interpret(response)

    def _build_request(self, value: Any, options: RequestInit) -> FetchRequest:
        method = self.method.upper()
        url = self._config.entrypoint_url + self.path
        headers = Headers.of(options.headers)
        body = options.body

        if self.endpoint.takes_input and value is not _MISSING:
            transformer = self._config.transformer
            payload = transformer.serialize(value)
            if self.method == "get":
                url = f"{url}?{build_query({BODY_PARAM: payload})}"
            else:
                headers = headers.merged({"content-type": transformer.media_type})
                body = payload

        # GET never carries a body
        if self.method == "get":
            body = None

        return FetchRequest(
            method=method,
            url=url,
            headers=headers,
            body=body.encode("utf-8") if isinstance(body, str) else body,
            timeout=options.timeout,
        )

    def _interpret(self, response: FetchResponse) -> Any:
        if not response.ok:
            raise TransportError(
                self.method.upper(),
                self.path,
                response.status,
                response.text() or response.reason,
            )
        if not self.endpoint.returns_output:
            return None
        text = response.text()
        if not text:
            return None
        return self._config.transformer.deserialize(text)


class Client:
    """Namespace of endpoint callers and nested namespaces.

    Members are reachable by attribute or item access with the schema's
    own keys; attribute access also accepts any spelling with the same
    normalized form.
    """

    __slots__ = ("_aliases", "_members", "_path")

    def __init__(self, path: str = "") -> None:
        self._path = path
        self._members: dict[str, EndpointCaller | Client] = {}
        self._aliases: dict[str, str] = {}

    def _add(self, key: str, member: EndpointCaller | Client) -> None:
        if key in self._members:
            msg = f"Duplicate client member {key!r} at {self._path or '/'}"
            raise ConfigurationError(msg)
        self._members[key] = member
        self._aliases.setdefault(normalize(key), key)

    def __getattr__(self, name: str) -> EndpointCaller | Client:
        # Only reached when normal lookup fails, i.e. never for slots
        try:
            return self._members[name]
        except KeyError:
            pass
        key = self._aliases.get(normalize(name))
        if key is None:
            msg = f"{type(self).__name__} at {self._path or '/'!r} has no member {name!r}"
            raise AttributeError(msg)
        return self._members[key]

    def __getitem__(self, key: str) -> EndpointCaller | Client:
        return self._members[key]

    def __contains__(self, key: object) -> bool:
        return key in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __dir__(self) -> list[str]:
        return [*super().__dir__(), *(k for k in self._members if k.isidentifier())]

    def __repr__(self) -> str:
        return f"Client({self._path or '/'}: {', '.join(self._members)})"


def _fill(node: Node, segments: tuple[str, ...], config: ClientConfig) -> Client:
    path = build_path(segments)
    namespace = Client(path)
    route = node if isinstance(node, Route) else node.route
    if route is not None:
        for method, endpoint in route.items():
            namespace._add(method, EndpointCaller(path, method, endpoint, config))
    if isinstance(node, Subtree):
        for key, child in node.items():
            namespace._add(key, _fill(child, (*segments, normalize(key)), config))
    return namespace


def build_client(schema: Any, config: ClientConfig | None = None, **overrides: Any) -> Client:
    """Build a client namespace for *schema*.

    Args:
        schema: A ``Subtree``, ``Route``, or plain nested mapping.
        config: Base configuration; defaults to ``ClientConfig()``.
        **overrides: Field overrides applied on top of *config*.
    """
    config = config or ClientConfig()
    if overrides:
        config = replace(config, **overrides)
    client = _fill(as_node(schema), (), config)
    (config.logger or logger).debug(
        "Built client for %s with %d top-level members", config.entrypoint_url or "<relative>", len(client)
    )
    return client
