"""Schema key normalization.

Both dispatchers derive URL segments from schema keys with ``normalize``,
so client and server agree on every path without explicit configuration.
Keys may use any casing; segments are always kebab-case::

    normalize("userProfile")   -> "user-profile"
    normalize("UserProfile")   -> "user-profile"
    normalize("user_profile")  -> "user-profile"
    normalize("HTTPServer")    -> "http-server"
    normalize("v2Items")       -> "v2-items"
    normalize("user-profile")  -> "user-profile"
"""

import re
from functools import lru_cache

# Word boundaries inside a single token: acronym followed by a capitalized
# word ("HTTPServer" -> "HTTP", "Server"), lowercase/digit followed by an
# uppercase letter ("userId" -> "user", "Id").
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

# Anything that is not a letter or digit separates words.
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def split_words(key: str) -> list[str]:
    """Split *key* into lowercase words on case and separator boundaries."""
    spaced = _ACRONYM_BOUNDARY.sub(r"\1 \2", key)
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", spaced)
    return [word.lower() for word in _SEPARATORS.split(spaced) if word]


@lru_cache(maxsize=1024)
def normalize(key: str) -> str:
    """Convert a schema key to its canonical kebab-case path segment.

    Pure and idempotent: ``normalize(normalize(k)) == normalize(k)``.
    Never applied to verb names.
    """
    return "-".join(split_words(key))
