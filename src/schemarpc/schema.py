"""Schema model — the declarative tree shared by client and server.

Every node is one of three tagged variants:

* ``Endpoint`` — one verb's contract: input/output validators and flags.
* ``Route``    — verb -> Endpoint at one path level.
* ``Subtree``  — key -> Route | Subtree; keys become path segments.

Usage::

    from schemarpc import Endpoint, Route, Subtree

    schema = Subtree({
        "users": Route(
            get=Endpoint(input=None, output=list[User]),
            post=Endpoint(input=CreateUser, output=User),
        ),
        "adminTools": Subtree({
            "auditLog": Route(get=Endpoint(input=None, output=None)),
        }),
    })

The tree is immutable once built and both dispatchers only read it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Literal, TypeAlias

from schemarpc.errors import ConfigurationError
from schemarpc.naming import normalize
from schemarpc.validation import Validator, as_validator

Method: TypeAlias = Literal["get", "post", "put", "patch", "delete"]

METHODS: Final[tuple[Method, ...]] = ("get", "post", "put", "patch", "delete")


class _Unvalidated:
    """Sentinel type: payload present but not validated (pass-through)."""

    __slots__ = ()
    _instance: _Unvalidated | None = None

    def __new__(cls) -> _Unvalidated:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNVALIDATED"

    def __reduce__(self) -> str:
        return "UNVALIDATED"


UNVALIDATED: Final = _Unvalidated()
"""Marks an endpoint input/output as unvalidated pass-through."""

Contract: TypeAlias = Validator | _Unvalidated | None


def _coerce_contract(value: Any) -> Contract:
    if value is None or value is UNVALIDATED:
        return value
    return as_validator(value)


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Contract for one verb at one path.

    ``input`` / ``output``:

    * a validator (or any type pydantic understands) enforces shape;
    * ``None`` means no payload, enforced;
    * ``UNVALIDATED`` (the default) means payload present but unchecked.

    ``invalidate`` and ``auto_scope_invalidation_depth`` declare cache
    invalidation intent for consumers; no dispatcher reads them.
    """

    input: Any = UNVALIDATED
    output: Any = UNVALIDATED
    is_metadata_used: bool = True
    is_metadata_required: bool = True
    cache_control: str | None = None
    invalidate: tuple[str, ...] = ()
    auto_scope_invalidation_depth: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "input", _coerce_contract(self.input))
        object.__setattr__(self, "output", _coerce_contract(self.output))
        object.__setattr__(self, "invalidate", tuple(self.invalidate))
        if self.auto_scope_invalidation_depth < 0:
            msg = "auto_scope_invalidation_depth must be >= 0"
            raise ConfigurationError(msg)

    @property
    def takes_input(self) -> bool:
        """False when the endpoint declares ``input=None``."""
        return self.input is not None

    @property
    def requires_input(self) -> bool:
        """True when a validator is declared for the input."""
        return self.input is not None and self.input is not UNVALIDATED

    @property
    def returns_output(self) -> bool:
        """False when the endpoint declares ``output=None``."""
        return self.output is not None


class Route(Mapping[str, Endpoint]):
    """Verb -> Endpoint mapping at one path level.

    Construct with keyword arguments (``Route(get=..., post=...)``) or a
    mapping. Verb keys are canonical lowercase.
    """

    __slots__ = ("_endpoints",)

    def __init__(self, endpoints: Mapping[str, Endpoint] | None = None, /, **verbs: Endpoint) -> None:
        merged = {**(endpoints or {}), **verbs}
        table: dict[str, Endpoint] = {}
        for verb, endpoint in merged.items():
            method = verb.lower()
            if method not in METHODS:
                msg = f"Unknown verb {verb!r} in Route. Expected one of: {', '.join(METHODS)}"
                raise ConfigurationError(msg)
            if not isinstance(endpoint, Endpoint):
                msg = f"Route verb {verb!r} must map to an Endpoint, got {type(endpoint).__name__}"
                raise ConfigurationError(msg)
            table[method] = endpoint
        self._endpoints: Mapping[str, Endpoint] = MappingProxyType(table)

    def __getitem__(self, key: str) -> Endpoint:
        return self._endpoints[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __repr__(self) -> str:
        return f"Route({', '.join(self._endpoints)})"


class Subtree(Mapping[str, "Route | Subtree"]):
    """Key -> Route | Subtree mapping. Keys become normalized path segments.

    A subtree may also carry its own ``route``: endpoints served at the
    subtree's own path, next to its children (``GET /users`` alongside
    ``GET /users/profile``).

    Plain dicts are converted: within a mapping, verb keys holding an
    ``Endpoint`` form the own route and every other key is a child.
    """

    __slots__ = ("_children", "route")

    def __init__(
        self,
        children: Mapping[str, Any] | None = None,
        /,
        *,
        route: Route | None = None,
        **named: Any,
    ) -> None:
        merged = {**(children or {}), **named}
        own: dict[str, Endpoint] = dict(route or {})
        table: dict[str, Route | Subtree] = {}
        segments: dict[str, str] = {}
        for key, child in merged.items():
            if isinstance(child, Endpoint):
                if key.lower() not in METHODS:
                    msg = f"Endpoint under non-verb key {key!r}; wrap it in a Route"
                    raise ConfigurationError(msg)
                own[key] = child
                continue
            segment = normalize(key)
            if not segment:
                msg = f"Schema key {key!r} normalizes to an empty path segment"
                raise ConfigurationError(msg)
            if segment in segments:
                msg = (
                    f"Schema keys {segments[segment]!r} and {key!r} both normalize "
                    f"to path segment {segment!r}"
                )
                raise ConfigurationError(msg)
            segments[segment] = key
            table[key] = as_node(child)
        self.route: Route | None = Route(own) if own else None
        self._children: Mapping[str, Route | Subtree] = MappingProxyType(table)

    def __getitem__(self, key: str) -> Route | Subtree:
        return self._children[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        parts = list(self._children)
        if self.route is not None:
            parts.insert(0, repr(self.route))
        return f"Subtree({', '.join(parts)})"


Node: TypeAlias = Route | Subtree


def as_node(value: Any) -> Node:
    """Coerce *value* into a schema node.

    ``Route`` and ``Subtree`` pass through. A non-empty mapping of verbs to
    ``Endpoint`` becomes a ``Route``; any other mapping a ``Subtree``.
    """
    if isinstance(value, Route | Subtree):
        return value
    if isinstance(value, Mapping):
        if value and all(
            isinstance(v, Endpoint) and k.lower() in METHODS for k, v in value.items()
        ):
            return Route(value)
        return Subtree(value)
    msg = f"Schema node must be a Route, Subtree, or mapping, got {type(value).__name__}"
    raise ConfigurationError(msg)


def build_path(segments: tuple[str, ...] | list[str]) -> str:
    """Join already-normalized segments into an endpoint path.

    ``()`` -> ``""``, ``("users",)`` -> ``"/users"``.
    """
    return "".join(f"/{segment}" for segment in segments)


@dataclass(frozen=True, slots=True)
class EndpointSite:
    """An endpoint together with its position in the tree."""

    keys: tuple[str, ...]
    path: str
    method: Method
    endpoint: Endpoint = field(repr=False)


def walk(schema: Node) -> Iterator[EndpointSite]:
    """Yield every endpoint depth-first, in declaration order."""
    yield from _walk(as_node(schema), (), ())


def _walk(node: Node, keys: tuple[str, ...], segments: tuple[str, ...]) -> Iterator[EndpointSite]:
    route = node if isinstance(node, Route) else node.route
    if route is not None:
        path = build_path(segments)
        for method, endpoint in route.items():
            yield EndpointSite(keys=keys, path=path, method=method, endpoint=endpoint)  # type: ignore[arg-type]
    if isinstance(node, Route):
        return
    for key, child in node.items():
        yield from _walk(child, (*keys, key), (*segments, normalize(key)))
