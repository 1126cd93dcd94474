"""Validation result — immutable container for validated data or issues."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Issue:
    """A single violated constraint.

    ``path`` locates the offending value inside the payload (field names
    and list indexes); an empty path means the payload itself.
    """

    path: tuple[str | int, ...]
    message: str


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """Structured report of a failed validation.

    ``issues`` holds one entry per violation. ``detail`` is the validator's
    own JSON-compatible error representation, surfaced verbatim when an
    output fails validation.
    """

    issues: tuple[Issue, ...]
    detail: Any = None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """The outcome of ``Validator.safe_parse``.

    The result is falsy when invalid, so you can write::

        result = validator.safe_parse(value)
        if not result:
            return result.error.issues
    """

    success: bool
    data: Any = None
    error: ValidationFailure | None = field(default=None)

    @classmethod
    def ok(cls, data: Any) -> ParseResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, issues: list[Issue] | tuple[Issue, ...], detail: Any = None) -> ParseResult:
        return cls(success=False, error=ValidationFailure(issues=tuple(issues), detail=detail))

    def __bool__(self) -> bool:
        return self.success
