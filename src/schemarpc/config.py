"""Dispatcher configuration.

ClientConfig and ServerConfig are frozen dataclasses: immutable after
creation, IDE-autocompletable, no string-key dict lookups.
``build_client`` / ``build_server`` accept either a config or keyword
overrides applied with ``dataclasses.replace``.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from schemarpc.fetch import Fetch, HttpxFetch, Interceptor, RequestInit
from schemarpc.http.request import Request
from schemarpc.transformers import JSON, Transformer

# (request, is_metadata_required) -> metadata | None; sync or async
MetadataResolver: TypeAlias = Callable[[Request, bool], Awaitable[Any] | Any]


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Client dispatcher configuration.

    Override what you need::

        config = ClientConfig(entrypoint_url="https://api.example.com/rpc")
    """

    # Base URL every endpoint path is appended to; trailing "/" is stripped
    entrypoint_url: str = ""

    # Wire
    transformer: Transformer = JSON
    fetch_defaults: RequestInit = field(default_factory=RequestInit)
    fetch: Fetch = field(default_factory=HttpxFetch)

    # Hooks
    interceptor: Interceptor | None = None

    logger: logging.Logger | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entrypoint_url", self.entrypoint_url.rstrip("/"))


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server dispatcher configuration.

    ``strict`` rejects handler keys with no schema counterpart at
    registration time; ``strict=False`` logs a warning and skips them.
    ``debug`` adds the exception text to 500 responses from failing
    handlers.
    """

    transformer: Transformer = JSON
    metadata_resolver: MetadataResolver | None = None
    strict: bool = True
    debug: bool = False
    logger: logging.Logger | None = None
