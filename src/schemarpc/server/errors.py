"""Error rendering for server requests.

Maps HTTPError exceptions and unexpected handler failures to JSON error
responses written through the request's ResponseWriter.
"""

import logging

from schemarpc.errors import HTTPError
from schemarpc.http.request import Request
from schemarpc.http.response import ResponseWriter

logger = logging.getLogger("schemarpc.server")


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    response: ResponseWriter,
    log: logging.Logger = logger,
) -> None:
    """Write *exc* as a JSON error response, if the response hasn't started."""
    log.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    if response.headers_sent:
        log.warning(
            "%d %s %s raised after the response started; closing it",
            exc.status,
            request.method,
            request.path,
        )
        await response.end()
        return

    for name, value in exc.headers:
        response.set_header(name, value)
    await response.json(exc.payload, status=exc.status)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    response: ResponseWriter,
    *,
    debug: bool,
    log: logging.Logger = logger,
) -> None:
    """Log an unexpected exception and answer 500."""
    log.exception("500 %s %s", request.method, request.path)

    if response.headers_sent:
        await response.end()
        return

    detail = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    await response.json({"error": detail}, status=500)
