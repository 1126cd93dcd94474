"""schemarpc — schema-driven RPC over HTTP.

One declarative schema drives both sides: a client whose callables issue
the HTTP requests, and a server that validates and routes them to
handlers.

Basic usage::

    from pydantic import BaseModel
    from schemarpc import Endpoint, Route, Subtree, build_client, build_server

    class User(BaseModel):
        id: int
        name: str

    schema = Subtree(
        users=Route(get=Endpoint(input=int, output=User, is_metadata_used=False)),
    )

    server = build_server(schema, {"users": {"get": lambda user_id, _meta, _ctx: load(user_id)}})
    client = build_client(schema, entrypoint_url="http://localhost:8000")
    user = await client.users.get(1)
"""

import logging

__version__ = "0.1.0"
__all__ = [
    "UNVALIDATED",
    "ClientConfig",
    "ConfigurationError",
    "Endpoint",
    "HTTPError",
    "HandlerContext",
    "HttpxFetch",
    "InvalidArgument",
    "JSON",
    "RPCServer",
    "RequestInit",
    "Route",
    "SchemaRPCError",
    "ServerConfig",
    "Subtree",
    "TAGGED",
    "TransformError",
    "TransportError",
    "build_client",
    "build_server",
    "normalize",
]

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import schemarpc`` fast while providing a clean top-level API.
    """
    if name in ("UNVALIDATED", "Endpoint", "Route", "Subtree"):
        from schemarpc import schema as _schema

        return getattr(_schema, name)

    if name in ("ClientConfig", "ServerConfig"):
        from schemarpc import config as _config

        return getattr(_config, name)

    if name in ("HttpxFetch", "RequestInit"):
        from schemarpc import fetch as _fetch

        return getattr(_fetch, name)

    if name == "build_client":
        from schemarpc.client.dispatch import build_client

        return build_client

    if name in ("HandlerContext", "RPCServer", "build_server"):
        from schemarpc import server as _server

        return getattr(_server, name)

    if name in ("JSON", "TAGGED"):
        from schemarpc import transformers as _transformers

        return getattr(_transformers, name)

    if name == "normalize":
        from schemarpc.naming import normalize

        return normalize

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidArgument",
        "SchemaRPCError",
        "TransformError",
        "TransportError",
    ):
        from schemarpc import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
