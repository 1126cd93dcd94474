"""Per-endpoint request handling.

``endpoint_handler`` turns one ``(method, Endpoint, handler)`` triple into
a route handler that runs the request protocol in order: metadata, input
extraction, deserialization, validation, invocation, output and
finalization. Protocol failures are raised as ``HTTPError`` subclasses;
the ASGI layer renders them.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from schemarpc._internal.invoke import invoke
from schemarpc.config import ServerConfig
from schemarpc.errors import (
    InputMissing,
    InputValidationError,
    MetadataError,
    OutputValidationError,
    PayloadDecodeError,
    TransformError,
)
from schemarpc.http.query import BODY_PARAM
from schemarpc.http.request import Request
from schemarpc.http.response import ResponseWriter
from schemarpc.routing.route import Next, RouteHandler
from schemarpc.schema import UNVALIDATED, Endpoint

logger = logging.getLogger("schemarpc.server")

# (input, metadata | None, context) -> output; sync or async
Handler: TypeAlias = Callable[[Any, Any, "HandlerContext"], Any]


@dataclass(frozen=True, slots=True)
class HandlerContext:
    """Raw request and response writer, handed to every handler.

    A handler that sends or ends ``response`` itself takes over the
    response; the dispatcher then writes nothing more.
    """

    request: Request
    response: ResponseWriter


async def read_body(request: Request, response: ResponseWriter, next: Next) -> None:  # noqa: A002
    """Middleware: buffer the raw request body before dispatch.

    Decoding waits for the input step, so metadata is still checked first.
    """
    await request.body()
    await next(request, response)


async def _resolve_metadata(endpoint: Endpoint, request: Request, config: ServerConfig) -> Any:
    if not endpoint.is_metadata_used:
        return None
    resolver = config.metadata_resolver
    metadata = None if resolver is None else await invoke(resolver, request, endpoint.is_metadata_required)
    if endpoint.is_metadata_required and metadata is None:
        raise MetadataError
    return metadata


async def _read_input(method: str, endpoint: Endpoint, request: Request, config: ServerConfig) -> Any:
    if not endpoint.takes_input:
        return None

    if method == "get":
        raw = request.query.get(BODY_PARAM)
    else:
        try:
            raw = await request.text()
        except UnicodeDecodeError as exc:
            raise PayloadDecodeError from exc

    if not raw:
        if endpoint.requires_input:
            raise InputMissing(f"No {BODY_PARAM} provided" if method == "get" else "No body provided")
        return None

    try:
        value = config.transformer.deserialize(raw)
    except TransformError as exc:
        raise PayloadDecodeError from exc

    if endpoint.input is UNVALIDATED:
        return value
    result = endpoint.input.safe_parse(value)
    if not result:
        raise InputValidationError(result.error.issues)
    return result.data


def _render_output(endpoint: Endpoint, output: Any, config: ServerConfig, log: logging.Logger) -> str | None:
    if not endpoint.returns_output:
        return None
    if endpoint.output is not UNVALIDATED:
        result = endpoint.output.safe_parse(output)
        if not result:
            log.error("Output validation failed: %s", result.error.detail)
            raise OutputValidationError(result.error.detail)
        output = result.data
    return config.transformer.serialize(output)


def endpoint_handler(
    method: str,
    endpoint: Endpoint,
    handler: Handler,
    config: ServerConfig,
) -> RouteHandler:
    """Build the route handler serving *endpoint* with *handler*."""
    log = config.logger or logger
    ok_status = 201 if method == "post" else 200

    async def handle(request: Request, response: ResponseWriter) -> None:
        metadata = await _resolve_metadata(endpoint, request, config)
        value = await _read_input(method, endpoint, request, config)

        output = await invoke(handler, value, metadata, HandlerContext(request, response))
        if response.writable_ended:
            return
        body = _render_output(endpoint, output, config, log)

        if endpoint.cache_control and not response.headers_sent:
            response.set_header("Cache-Control", endpoint.cache_control)
        if not response.headers_sent:
            response.set_status(ok_status)
        if body is None:
            await response.send(b"")
        else:
            await response.send(body, content_type=config.transformer.media_type)

    return handle
