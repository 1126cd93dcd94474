"""Routing — the verb + path registration table behind the server dispatcher."""

from schemarpc.routing.route import Middleware, Next, Route, RouteHandler
from schemarpc.routing.router import Router, split_path

__all__ = ["Middleware", "Next", "Route", "RouteHandler", "Router", "split_path"]
