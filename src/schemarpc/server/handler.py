"""ASGI handler — translates ASGI scope/messages to schemarpc types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through routing, and makes sure
every request ends with exactly one completed response.
"""

import logging

from schemarpc._internal.asgi import Receive, Scope, Send
from schemarpc.errors import HTTPError
from schemarpc.http.request import Request
from schemarpc.http.response import ResponseWriter
from schemarpc.routing.router import Router
from schemarpc.server.errors import handle_http_error, handle_internal_error, logger


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool = False,
    log: logging.Logger = logger,
) -> None:
    """Process a single HTTP request through routing and its endpoint."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = ResponseWriter(send)

    try:
        route = router.match(request.method, request.path)
        await route(request, response)
    except HTTPError as exc:
        await handle_http_error(exc, request, response, log)
    except Exception as exc:
        await handle_internal_error(exc, request, response, debug=debug, log=log)

    if not response.writable_ended:
        await response.end()
