"""schemarpc exception hierarchy.

Shared by the client dispatcher, the server dispatcher, the router, and the
ASGI handler so every module raises and catches the same types.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


class SchemaRPCError(Exception):
    """Base for all schemarpc-specific errors."""


class ConfigurationError(SchemaRPCError):
    """Raised when a schema, handler tree, or config is invalid.

    Typically raised while building a client or registering handlers,
    before any request is served.
    """


class InvalidArgument(SchemaRPCError, ValueError):  # noqa: N818 — mirrors the wire taxonomy
    """A client call is missing a required input value.

    Raised before any network activity takes place.
    """


class TransformError(SchemaRPCError, ValueError):
    """A payload could not be serialized or deserialized by a transformer."""


class TransportError(SchemaRPCError):
    """A client call received a non-2xx response.

    Carries the verb, the derived path, the numeric status, and a
    description taken from the response body (or the reason phrase when
    the body is empty).
    """

    def __init__(self, method: str, path: str, status: int, description: str) -> None:
        self.method = method
        self.path = path
        self.status = status
        self.description = description
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"Fetch at {self.method.upper()} {self.path} failed, "
            f"status {self.status}, description: '{self.description}'"
        )

    def __repr__(self) -> str:
        return (
            f"TransportError(method={self.method!r}, path={self.path!r}, "
            f"status={self.status}, description={self.description!r})"
        )


@dataclass(frozen=True, slots=True)
class HTTPError(SchemaRPCError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, the server dispatcher, or handlers. The ASGI
    handler catches these and renders them as JSON error bodies.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    @property
    def payload(self) -> Any:
        """JSON-compatible response body for this error."""
        return {"error": self.detail or f"Error {self.status}"}


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class MetadataError(HTTPError):
    """400 — the endpoint requires metadata and none could be resolved."""

    def __init__(self, detail: str = "Metadata cannot be parsed.") -> None:
        super().__init__(status=400, detail=detail)


class InputMissing(HTTPError):  # noqa: N818
    """400 — the endpoint declares an input validator but no payload arrived."""

    def __init__(self, detail: str = "No body provided") -> None:
        super().__init__(status=400, detail=detail)


class PayloadDecodeError(HTTPError):
    """400 — the payload arrived but the transformer could not decode it."""

    def __init__(self, detail: str = "Payload cannot be deserialized.") -> None:
        super().__init__(status=400, detail=detail)


@dataclass(frozen=True, slots=True, init=False)
class InputValidationError(HTTPError):
    """400 — the payload failed input validation.

    The body is the list of ``{"path", "message"}`` issues, one per
    violated constraint.
    """

    issues: tuple[Any, ...] = field(default=())

    def __init__(self, issues: Sequence[Any]) -> None:
        object.__setattr__(self, "status", 400)
        object.__setattr__(self, "detail", f"{len(issues)} validation issue(s)")
        object.__setattr__(self, "headers", ())
        object.__setattr__(self, "issues", tuple(issues))

    @property
    def payload(self) -> Any:
        return [{"path": list(issue.path), "message": issue.message} for issue in self.issues]


@dataclass(frozen=True, slots=True, init=False)
class OutputValidationError(HTTPError):
    """500 — the handler's return value failed output validation.

    The validator's error detail is surfaced to the caller verbatim.
    """

    error_detail: Any = None

    def __init__(self, error_detail: Any) -> None:
        object.__setattr__(self, "status", 500)
        object.__setattr__(self, "detail", "Output validation failed")
        object.__setattr__(self, "headers", ())
        object.__setattr__(self, "error_detail", error_detail)

    @property
    def payload(self) -> Any:
        return self.error_detail
