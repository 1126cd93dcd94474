"""schemarpc CLI — route introspection.

Entry point registered as ``schemarpc`` in ``pyproject.toml``::

    [project.scripts]
    schemarpc = "schemarpc.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``schemarpc`` command."""
    parser = argparse.ArgumentParser(
        prog="schemarpc",
        description="schemarpc — schema-driven RPC over HTTP.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- schemarpc routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the endpoints of a schema or server")
    routes_parser.add_argument(
        "target",
        help="Import string (e.g. myapi:schema, myapi:server, myapi:create_server)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from schemarpc.cli._routes import run_routes

        run_routes(args)
