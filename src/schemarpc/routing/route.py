"""Route definition — one verb at one path."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from schemarpc.http.request import Request
from schemarpc.http.response import ResponseWriter

# Terminal request handler registered on the router
RouteHandler: TypeAlias = Callable[[Request, ResponseWriter], Awaitable[None]]

# The rest of the chain, as seen by a middleware
Next: TypeAlias = Callable[[Request, ResponseWriter], Awaitable[None]]

# Runs ahead of the handler; must await ``next`` to continue the chain
Middleware: TypeAlias = Callable[[Request, ResponseWriter, Next], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``method`` is uppercase (wire form). ``middleware`` runs in order
    before ``handler``. ``target`` is the user-level callable behind the
    handler, kept for introspection.
    """

    path: str
    method: str
    handler: RouteHandler
    middleware: tuple[Middleware, ...] = ()
    name: str | None = None
    target: Any = field(default=None, repr=False, compare=False)

    async def __call__(self, request: Request, response: ResponseWriter) -> None:
        """Run the middleware chain, then the handler."""
        await self._run(0, request, response)

    async def _run(self, index: int, request: Request, response: ResponseWriter) -> None:
        if index == len(self.middleware):
            await self.handler(request, response)
            return

        async def next_step(req: Request, res: ResponseWriter) -> None:
            await self._run(index + 1, req, res)

        await self.middleware[index](request, response, next_step)
