"""RPCServer — a schema bound to handlers, served as an ASGI app.

Usage::

    server = build_server(schema, {
        "users": {
            "get": get_user,
            "profile": {"post": update_profile},
        },
    }, metadata_resolver=resolve_session)

    # any ASGI server
    uvicorn.run(server)

The handler tree mirrors the schema's keys and may be sparse. More
handlers can be layered in later with ``register``; registering the same
verb at the same path again replaces the earlier handler.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any, TypeAlias

from schemarpc._internal.asgi import Receive, Scope, Send
from schemarpc.config import ServerConfig
from schemarpc.errors import ConfigurationError
from schemarpc.naming import normalize
from schemarpc.routing.route import Route as RouteEntry
from schemarpc.routing.router import Router
from schemarpc.schema import METHODS, Endpoint, Node, Route, Subtree, as_node, build_path
from schemarpc.server.dispatch import endpoint_handler, logger, read_body
from schemarpc.server.handler import handle_request

# (method, endpoint, handler, handler keys, path), checked but not yet routed
_Pending: TypeAlias = tuple[str, Endpoint, Any, tuple[str, ...], str]


class RPCServer:
    """Server dispatcher for one schema.

    Mutable during setup (``register``); request handling only reads the
    route table.
    """

    __slots__ = ("_logger", "config", "router", "schema")

    def __init__(self, schema: Any, config: ServerConfig | None = None) -> None:
        self.schema: Node = as_node(schema)
        self.config: ServerConfig = config or ServerConfig()
        self.router = Router()
        self._logger = self.config.logger or logger

    def __repr__(self) -> str:
        return f"RPCServer({len(self.router)} routes)"

    # -- Registration --

    def register(self, handlers: Mapping[str, Any]) -> RPCServer:
        """Bind the handlers in *handlers* to their schema endpoints. Chainable.

        Raises ``ConfigurationError`` for handler keys with no schema
        counterpart when ``config.strict`` is set; otherwise those keys are
        logged and skipped. The whole tree is checked before any route is
        added, so a failed call leaves the router unchanged.
        """
        pending: list[_Pending] = []
        self._fill(self.schema, handlers, (), (), pending)
        for method, endpoint, handler, keys, path in pending:
            self._add(method, endpoint, handler, keys, path)
        return self

    def _fill(
        self,
        node: Node,
        handlers: Mapping[str, Any],
        keys: tuple[str, ...],
        segments: tuple[str, ...],
        pending: list[_Pending],
    ) -> None:
        if not isinstance(handlers, Mapping):
            msg = f"Handlers at {'.'.join(keys) or '<root>'} must be a mapping, got {type(handlers).__name__}"
            raise ConfigurationError(msg)

        own = node if isinstance(node, Route) else node.route
        for key, value in handlers.items():
            method = key.lower()
            if own is not None and method in METHODS and method in own:
                if not callable(value):
                    msg = f"Handler at {'.'.join((*keys, key))} is not callable: {value!r}"
                    raise ConfigurationError(msg)
                pending.append((method, own[method], value, (*keys, key), build_path(segments)))
            elif isinstance(node, Subtree) and key in node:
                self._fill(node[key], value, (*keys, key), (*segments, normalize(key)), pending)
            else:
                self._unmatched((*keys, key))

    def _add(self, method: str, endpoint: Endpoint, handler: Any, keys: tuple[str, ...], path: str) -> None:
        self._logger.debug("Registering %s %s", method.upper(), path or "/")
        self.router.add(
            RouteEntry(
                path=path,
                method=method.upper(),
                handler=endpoint_handler(method, endpoint, handler, self.config),
                middleware=() if method == "get" else (read_body,),
                name=".".join(keys),
                target=handler,
            )
        )

    def _unmatched(self, keys: tuple[str, ...]) -> None:
        where = ".".join(keys)
        if self.config.strict:
            msg = f"Handler key {where!r} has no matching schema entry"
            raise ConfigurationError(msg)
        self._logger.warning("Skipping handler %r: no matching schema entry", where)

    # -- Introspection --

    @property
    def routes(self) -> list[RouteEntry]:
        """Registered routes, depth-first."""
        return self.router.routes

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            debug=self.config.debug,
            log=self._logger,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge lifespan startup and shutdown; there is nothing to run."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def build_server(
    schema: Any,
    handlers: Mapping[str, Any] | None = None,
    config: ServerConfig | None = None,
    **overrides: Any,
) -> RPCServer:
    """Build an ``RPCServer`` for *schema* and register *handlers*.

    Args:
        schema: A ``Subtree``, ``Route``, or plain nested mapping.
        handlers: Handler tree mirroring the schema keys; may be sparse.
        config: Base configuration; defaults to ``ServerConfig()``.
        **overrides: Field overrides applied on top of *config*.
    """
    config = config or ServerConfig()
    if overrides:
        config = replace(config, **overrides)
    server = RPCServer(schema, config)
    if handlers:
        server.register(handlers)
    return server
