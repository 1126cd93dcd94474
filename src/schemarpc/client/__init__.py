"""Client dispatcher."""

from schemarpc.client.dispatch import Client, EndpointCaller, build_client
from schemarpc.fetch import (
    Fetch,
    FetchRequest,
    FetchResponse,
    HttpxFetch,
    Interception,
    Interceptor,
    RequestInit,
)

__all__ = [
    "Client",
    "EndpointCaller",
    "Fetch",
    "FetchRequest",
    "FetchResponse",
    "HttpxFetch",
    "Interception",
    "Interceptor",
    "RequestInit",
    "build_client",
]
