"""Server dispatcher."""

from schemarpc.server.app import RPCServer, build_server
from schemarpc.server.dispatch import Handler, HandlerContext, endpoint_handler, read_body
from schemarpc.server.handler import handle_request

__all__ = [
    "Handler",
    "HandlerContext",
    "RPCServer",
    "build_server",
    "endpoint_handler",
    "handle_request",
    "read_body",
]
