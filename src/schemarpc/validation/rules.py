"""Lightweight field rules for object payloads.

Each rule is a callable with the signature::

    def rule(value: Any) -> str | None:
        '''Return error message, or None if valid.'''

Parameterized rules are factory functions that return a rule::

    def max_length(n: int) -> Rule:
        def check(value: Any) -> str | None:
            if len(value) > n:
                return f"Must be at most {n} characters"
            return None
        return check

``FieldRules`` turns a mapping of field name to rules into a validator
usable as an endpoint input or output, without pulling in a model class::

    CreateUser = FieldRules({"name": [required, max_length(50)], "email": [required, email]})
"""

import re
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from schemarpc.validation.result import Issue, ParseResult

Rule: TypeAlias = Callable[[Any], str | None]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: Any) -> str | None:
    """Field must be present and non-empty."""
    if value is None:
        return "Required"
    if isinstance(value, str) and not value.strip():
        return "Required"
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int) -> Rule:
    """Value must have at most *n* characters (or items)."""

    def check(value: Any) -> str | None:
        if len(value) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Rule:
    """Value must have at least *n* characters (or items)."""

    def check(value: Any) -> str | None:
        if len(value) < n:
            return f"Must be at least {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern — checks structure, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: Any) -> str | None:
    """Value must be a valid email address (basic format check)."""
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return "Must be a valid email address"
    return None


def matches(pattern: str, message: str | None = None) -> Rule:
    """Value must be a string matching the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if not isinstance(value, str) or not compiled.match(value):
            return message or f"Must match pattern: {pattern}"
        return None

    return check


def one_of(*choices: Any) -> Rule:
    """Value must be one of the given choices."""
    allowed = tuple(choices)

    def check(value: Any) -> str | None:
        if value not in allowed:
            options = ", ".join(str(choice) for choice in allowed)
            return f"Must be one of: {options}"
        return None

    return check


# ---------------------------------------------------------------------------
# Type
# ---------------------------------------------------------------------------


def string(value: Any) -> str | None:
    """Value must be a string."""
    if not isinstance(value, str):
        return "Must be a string"
    return None


def integer(value: Any) -> str | None:
    """Value must be an integer (booleans rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return "Must be a whole number"
    return None


def number(value: Any) -> str | None:
    """Value must be an int or float (booleans rejected)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return "Must be a number"
    return None


class FieldRules:
    """Validator for object payloads built from per-field rule lists.

    Fields without a value skip every rule except ``required``, so optional
    fields are expressed by leaving ``required`` out. Unknown fields are
    dropped from the validated data.
    """

    __slots__ = ("rules",)

    def __init__(self, rules: Mapping[str, list[Rule]]) -> None:
        self.rules = dict(rules)

    def __repr__(self) -> str:
        return f"FieldRules({sorted(self.rules)!r})"

    def safe_parse(self, value: Any) -> ParseResult:
        if not isinstance(value, Mapping):
            issue = Issue(path=(), message="Expected an object")
            return ParseResult.fail([issue], detail=[{"path": [], "message": issue.message}])

        issues: list[Issue] = []
        cleaned: dict[str, Any] = {}

        for field_name, rules in self.rules.items():
            field_value = value.get(field_name)
            field_failed = False
            for rule in rules:
                if field_value is None and rule is not required:
                    continue
                error = rule(field_value)
                if error is not None:
                    issues.append(Issue(path=(field_name,), message=error))
                    field_failed = True
                    # No point running length checks on a missing value
                    if rule is required:
                        break
            if not field_failed and field_value is not None:
                cleaned[field_name] = field_value

        if issues:
            detail = [{"path": list(i.path), "message": i.message} for i in issues]
            return ParseResult.fail(issues, detail=detail)
        return ParseResult.ok(cleaned)
