from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_NOT_FOUND = object()


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _as_token(item: Any) -> Any:
    # Numbers in a document match their text form in a query, e.g. 2 matches "2".
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return str(item)
    return None


def _step(cursor: Any, token: str) -> Any:
    if isinstance(cursor, Mapping):
        if token in cursor:
            return cursor[token]
        return _NOT_FOUND
    if is_sequence(cursor):
        # Sequences are addressed by index first, like keys of a mapping.
        if token.isascii() and token.isdigit() and int(token) < len(cursor):
            return cursor[int(token)]
        for item in cursor:
            if item == token or _as_token(item) == token:
                return item
    return _NOT_FOUND


def _found(cursor: Any) -> bool:
    if cursor is _NOT_FOUND or cursor is None:
        return False
    # A present key holding an empty collection still matches.
    if isinstance(cursor, Mapping) or is_sequence(cursor):
        return True
    return bool(cursor)


def find_in(query: str, document: Any, delimiter: str = "/") -> bool:
    """
    Find a query like `GET/page/2` in a permissions document.

    Each `delimiter`-separated token descends one level: into a mapping by key, into a
    sequence by index or by matching element. Missing tokens make the result False.

    Example:
        >>> find_in("GET/page/1", {"GET": {"page": [1, 2, 3]}})
        True
        >>> find_in("GET#other#a/b", {"GET": {"other": [1, "a/b"]}}, "#")
        True
    """
    cursor = document
    for token in query.split(delimiter or "/"):
        cursor = _step(cursor, token)
        if cursor is _NOT_FOUND:
            break
    return _found(cursor)
