from __future__ import annotations

from typing import Any, Dict, Iterator, Optional


class PermissionCache:
    """
    In-memory store of retrieved permission documents, keyed by source identifier.

    No TTL and no eviction: entries live until `clear()`. Concurrent first fetches of
    the same source both write here; the last write wins.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: str, document: Any) -> None:
        self._entries[key] = document

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
