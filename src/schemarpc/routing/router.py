"""Router with trie-based path matching.

Paths are made of static segments only (schema keys after
normalization). Registration may continue after the first request:
``RPCServer.register`` layers more handlers into the same router.
Registering a (path, method) pair again replaces the earlier route.
"""

import logging

from schemarpc.errors import MethodNotAllowed, NotFound
from schemarpc.routing.route import Route

logger = logging.getLogger("schemarpc.routing")


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty segments.

    ``"/users/by-id"`` -> ``["users", "by-id"]``; ``""`` and ``"/"`` -> ``[]``.
    """
    return [part for part in path.strip("/").split("/") if part]


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("children", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Routes at this node, keyed by uppercase HTTP method
        self.routes_by_method: dict[str, Route] = {}


class Router:
    """Route table keyed by path segments and HTTP method.

    Usage::

        router = Router()
        router.add(Route("/users", "GET", handler))
        match = router.match("GET", "/users")
    """

    __slots__ = ("_root",)

    def __init__(self) -> None:
        self._root = _TrieNode()

    def add(self, route: Route) -> Route | None:
        """Add *route*; return the route it replaced, if any."""
        node = self._root
        for segment in split_path(route.path):
            node = node.children.setdefault(segment, _TrieNode())

        method = route.method.upper()
        replaced = node.routes_by_method.get(method)
        node.routes_by_method[method] = route
        if replaced is not None:
            logger.debug("Replaced route %s %s", method, route.path or "/")
        return replaced

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, depth-first in registration order.

        Useful for introspection and the ``routes`` CLI command.
        """
        result: list[Route] = []
        self._collect_routes(self._root, result)
        return result

    def _collect_routes(self, node: _TrieNode, result: list[Route]) -> None:
        result.extend(node.routes_by_method.values())
        for child in node.children.values():
            self._collect_routes(child, result)

    def __len__(self) -> int:
        return len(self.routes)

    def match(self, method: str, path: str) -> Route:
        """Match a request method and path.

        Returns the ``Route`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        node: _TrieNode | None = self._root
        for segment in split_path(path):
            node = node.children.get(segment)
            if node is None:
                raise NotFound(f"No route matches {method} {path!r}")

        route = node.routes_by_method.get(method.upper())
        if route is not None:
            return route

        if node.routes_by_method:
            raise MethodNotAllowed(frozenset(node.routes_by_method))

        raise NotFound(f"No route matches {method} {path!r}")
