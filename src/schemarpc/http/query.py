"""Query string handling for the ``__body`` GET payload.

``QueryParams`` parses an incoming query string (percent-decoding each
value exactly once); ``encode_component`` / ``build_query`` produce the
outgoing side with ``encodeURIComponent`` escaping so both ends agree.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, quote

# Reserved query parameter carrying the serialized GET payload
BODY_PARAM = "__body"

# Characters left unescaped by encodeURIComponent
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode *value* like ``encodeURIComponent`` (UTF-8)."""
    return quote(value, safe=_COMPONENT_SAFE)


def build_query(params: Mapping[str, str]) -> str:
    """Encode *params* as ``k=v&...``; empty mapping gives ``""``."""
    return "&".join(f"{encode_component(k)}={encode_component(v)}" for k, v in params.items())


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query string as field name -> list of values.
        _raw: Raw query string bytes.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: bytes

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        # Payloads are UTF-8 percent-encoded; only the escapes need decoding
        parsed = parse_qs(query_string.decode("latin-1"), keep_blank_values=True, encoding="utf-8")
        object.__setattr__(self, "_data", parsed)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    @property
    def raw(self) -> bytes:
        return self._raw
