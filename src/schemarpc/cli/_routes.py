"""``schemarpc routes`` — list endpoints.

For a schema, prints every endpoint with its input and output contract.
For a server, prints every registered route with the handler behind it.
"""

import argparse
import sys

from schemarpc.cli._resolve import resolve_target
from schemarpc.schema import UNVALIDATED, walk
from schemarpc.server.app import RPCServer


def _contract(value: object) -> str:
    if value is None:
        return "none"
    if value is UNVALIDATED:
        return "any"
    return repr(value)


def _rows(target: object) -> list[tuple[str, str, str]]:
    if isinstance(target, RPCServer):
        rows = []
        for route in target.routes:
            handler_name = getattr(route.target, "__qualname__", repr(route.target))
            if route.name:
                handler_name = f"{handler_name} ({route.name})"
            rows.append((route.method, route.path or "/", handler_name))
        return rows
    return [
        (
            site.method.upper(),
            site.path or "/",
            f"input={_contract(site.endpoint.input)} output={_contract(site.endpoint.output)}",
        )
        for site in walk(target)
    ]


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / PATH / TARGET table for ``args.target``."""
    try:
        target = resolve_target(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = _rows(target)
    if not rows:
        print("No routes registered.")
        return

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "TARGET"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, name in rows:
        print(fmt.format(method, path, name))
