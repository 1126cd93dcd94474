"""Pydantic-backed validators.

Any type pydantic understands (``BaseModel`` subclasses, ``list[Model]``,
``int``, ``TypedDict``, annotated types, ...) becomes a validator::

    users = TypeValidator(list[User])
    result = users.safe_parse([{"name": "a"}])
"""

import json
from typing import Any

from pydantic import TypeAdapter, ValidationError

from schemarpc.validation.result import Issue, ParseResult


class TypeValidator:
    """Validator wrapping a pydantic ``TypeAdapter``.

    ``safe_parse`` never raises for invalid data. Issues use pydantic's
    ``loc`` as path and ``msg`` as message; the failure detail is the
    JSON-safe list of pydantic error dicts.
    """

    __slots__ = ("_adapter", "type")

    def __init__(self, tp: Any) -> None:
        self.type = tp
        self._adapter: TypeAdapter[Any] = TypeAdapter(tp)

    def __repr__(self) -> str:
        name = self.type.__name__ if isinstance(self.type, type) else repr(self.type)
        return f"TypeValidator({name})"

    def safe_parse(self, value: Any) -> ParseResult:
        try:
            data = self._adapter.validate_python(value)
        except ValidationError as exc:
            issues = [
                Issue(path=tuple(error["loc"]), message=error["msg"])
                for error in exc.errors(include_url=False)
            ]
            detail = json.loads(exc.json(include_url=False))
            return ParseResult.fail(issues, detail=detail)
        return ParseResult.ok(data)

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema of the wrapped type."""
        return self._adapter.json_schema()
