"""Wire payload transformers.

A transformer is a symmetric pair: ``serialize(value) -> str`` and
``deserialize(text) -> value``, plus the ``media_type`` sent as the
request/response Content-Type. Client and server must use the same one.

Two are provided:

* ``JSON`` — plain JSON (the default). Models, dataclasses, datetimes and
  other rich values are reduced to JSON data by pydantic-core on the way
  out and come back as plain JSON values.
* ``TAGGED`` — JSON with a type-annotation sidecar, so values JSON cannot
  express natively (datetimes, decimals, UUIDs, sets, tuples, bytes,
  non-finite floats) survive the round trip::

      {"json": {"at": "2024-01-01T00:00:00"}, "meta": {"values": {"at": "datetime"}}}
"""

import base64
import dataclasses
import datetime
import json
import math
import uuid
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from schemarpc.errors import TransformError


@runtime_checkable
class Transformer(Protocol):
    """Serialize/deserialize pair defining the wire payload encoding."""

    media_type: str

    def serialize(self, value: Any) -> str: ...

    def deserialize(self, text: str) -> Any: ...


def _to_plain(value: Any) -> Any:
    """Dump models and dataclasses to plain containers; leave the rest alone."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class JSONTransformer:
    """Plain JSON transformer (stdlib ``json``)."""

    media_type = "application/json"

    def __repr__(self) -> str:
        return "JSONTransformer()"

    def serialize(self, value: Any) -> str:
        try:
            return json.dumps(value, default=to_jsonable_python, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise TransformError(str(exc)) from exc

    def deserialize(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as exc:
            raise TransformError(f"Invalid JSON payload: {exc}") from exc


# ---------------------------------------------------------------------------
# Tagged transformer
# ---------------------------------------------------------------------------

# tag -> (encode, decode); encode maps the value to a JSON-native stand-in
_CODECS: dict[str, tuple[Callable[[Any], Any], Callable[[Any], Any]]] = {
    "datetime": (lambda v: v.isoformat(), datetime.datetime.fromisoformat),
    "date": (lambda v: v.isoformat(), datetime.date.fromisoformat),
    "time": (lambda v: v.isoformat(), datetime.time.fromisoformat),
    "timedelta": (lambda v: v.total_seconds(), lambda v: datetime.timedelta(seconds=v)),
    "decimal": (str, Decimal),
    "uuid": (str, uuid.UUID),
    "bytes": (lambda v: base64.b64encode(v).decode("ascii"), base64.b64decode),
    "float": (repr, float),
    "set": (list, set),
    "frozenset": (list, frozenset),
    "tuple": (list, tuple),
}


def _tag_of(value: Any) -> str | None:
    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime.datetime):
        return "datetime"
    if isinstance(value, datetime.date):
        return "date"
    if isinstance(value, datetime.time):
        return "time"
    if isinstance(value, datetime.timedelta):
        return "timedelta"
    if isinstance(value, Decimal):
        return "decimal"
    if isinstance(value, uuid.UUID):
        return "uuid"
    if isinstance(value, bytes | bytearray):
        return "bytes"
    if isinstance(value, float) and not math.isfinite(value):
        return "float"
    if isinstance(value, frozenset):
        return "frozenset"
    if isinstance(value, set):
        return "set"
    if isinstance(value, tuple):
        return "tuple"
    return None


def _decode(tag: str, value: Any) -> Any:
    if tag not in _CODECS:
        msg = f"unknown tag {tag!r}"
        raise ValueError(msg)
    _, decode = _CODECS[tag]
    return decode(value)


def _escape(key: Any) -> str:
    return str(key).replace("\\", "\\\\").replace(".", "\\.")


def _split_path(path: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    chars = iter(path)
    for char in chars:
        if char == "\\":
            current.append(next(chars, ""))
        elif char == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _depth(path: str) -> int:
    return len(_split_path(path))


class TaggedTransformer:
    """JSON plus a ``meta`` sidecar recording non-JSON types by path.

    Paths are dot-joined keys/indexes (dots in keys are escaped); a tag on
    the payload itself goes in ``meta["root"]`` instead. Values with no
    special type produce no ``meta`` entry, and a payload with no tagged
    values is just ``{"json": ...}``.
    """

    media_type = "application/json"

    def __repr__(self) -> str:
        return "TaggedTransformer()"

    def serialize(self, value: Any) -> str:
        annotations: dict[str | None, str] = {}
        try:
            plain = self._encode(value, None, annotations)
            envelope: dict[str, Any] = {"json": plain}
            meta: dict[str, Any] = {}
            if None in annotations:
                meta["root"] = annotations.pop(None)
            if annotations:
                meta["values"] = annotations
            if meta:
                envelope["meta"] = meta
            return json.dumps(envelope, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise TransformError(str(exc)) from exc

    def deserialize(self, text: str) -> Any:
        try:
            envelope = json.loads(text)
        except ValueError as exc:
            raise TransformError(f"Invalid JSON payload: {exc}") from exc
        if not isinstance(envelope, Mapping) or "json" not in envelope:
            msg = "Tagged payload must be an object with a 'json' key"
            raise TransformError(msg)
        root = {"": envelope["json"]}
        try:
            meta = envelope.get("meta") or {}
            annotations = meta.get("values") or {}
            # Deepest paths first so containers are rebuilt after their contents
            ordered = sorted(annotations.items(), key=lambda item: -_depth(item[0]))
            for path, tag in ordered:
                self._restore(root, path, tag)
            if "root" in meta:
                root[""] = _decode(meta["root"], root[""])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise TransformError(f"Invalid tagged payload: {exc}") from exc
        return root[""]

    def _encode(self, value: Any, path: str | None, annotations: dict[str | None, str]) -> Any:
        value = _to_plain(value)
        tag = _tag_of(value)
        if tag is not None:
            annotations[path] = tag
            encode, _ = _CODECS[tag]
            value = encode(value)
            if tag not in ("set", "frozenset", "tuple"):
                return value
        if isinstance(value, Mapping):
            out: dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    msg = f"Mapping keys must be strings, got {type(key).__name__}"
                    raise TypeError(msg)
                out[key] = self._encode(item, self._child(path, key), annotations)
            return out
        if isinstance(value, list):
            return [self._encode(item, self._child(path, i), annotations) for i, item in enumerate(value)]
        if value is None or isinstance(value, str | int | float | bool):
            return value
        msg = f"Object of type {type(value).__name__} is not serializable"
        raise TypeError(msg)

    @staticmethod
    def _child(path: str | None, key: Any) -> str:
        escaped = _escape(key)
        return escaped if path is None else f"{path}.{escaped}"

    @staticmethod
    def _restore(root: dict[str, Any], path: str, tag: str) -> None:
        parts = ["", *_split_path(path)]
        container: Any = root
        for part in parts[:-1]:
            container = container[int(part)] if isinstance(container, list) else container[part]
        last = parts[-1]
        key: Any = int(last) if isinstance(container, list) else last
        container[key] = _decode(tag, container[key])


JSON = JSONTransformer()
TAGGED = TaggedTransformer()
