"""Target import resolution — resolves ``"module:attribute"`` strings.

Locates a schema node or an ``RPCServer`` from a user-supplied import
string.
"""

import importlib
from collections.abc import Mapping

from schemarpc.errors import ConfigurationError
from schemarpc.schema import Node, Route, Subtree, as_node
from schemarpc.server.app import RPCServer


def resolve_target(import_string: str) -> Node | RPCServer:
    """Resolve an import string to a schema node or an ``RPCServer``.

    Accepts ``"module:attribute"`` format. When the attribute portion is
    omitted, defaults to ``"server"``. A zero-argument factory is called.
    Plain nested mappings are converted with ``as_node``.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is neither a schema nor a server.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "server"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, RPCServer | Route | Subtree):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, RPCServer | Route | Subtree):
        return obj
    if isinstance(obj, Mapping):
        try:
            return as_node(obj)
        except ConfigurationError as exc:
            msg = f"{import_string!r} is not a valid schema: {exc}"
            raise TypeError(msg) from exc

    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a schema or RPCServer"
    raise TypeError(msg)
