"""Validator capability — anything with ``safe_parse(value) -> ParseResult``.

Usage::

    from pydantic import BaseModel
    from schemarpc.validation import as_validator, FieldRules, required

    class User(BaseModel):
        name: str

    users = as_validator(list[User])          # pydantic-backed
    login = FieldRules({"email": [required]})  # rule-backed

    result = users.safe_parse([{"name": "a"}])
    if not result:
        # result.error.issues == (Issue(path=(0, "name"), message=...), ...)
        ...
"""

from typing import Any, Protocol, runtime_checkable

from schemarpc.validation.adapter import TypeValidator
from schemarpc.validation.result import Issue, ParseResult, ValidationFailure
from schemarpc.validation.rules import (
    FieldRules,
    Rule,
    email,
    integer,
    matches,
    max_length,
    min_length,
    number,
    one_of,
    required,
    string,
)

__all__ = [
    "FieldRules",
    "Issue",
    "ParseResult",
    "Rule",
    "TypeValidator",
    "ValidationFailure",
    "Validator",
    "as_validator",
    "email",
    "integer",
    "matches",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "required",
    "string",
]


@runtime_checkable
class Validator(Protocol):
    """Accepts or rejects a value.

    On success the result carries the canonical value; on failure it
    carries structured issues. Must not raise for invalid data.
    """

    def safe_parse(self, value: Any) -> ParseResult: ...


def as_validator(obj: Any) -> Validator:
    """Return *obj* if it already is a validator, else wrap it with pydantic."""
    if isinstance(obj, Validator):
        return obj
    return TypeValidator(obj)
