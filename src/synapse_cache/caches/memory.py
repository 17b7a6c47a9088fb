"""In-memory resource cache."""

import logging
import time
from collections import OrderedDict
from typing import Any

from synapse_cache.types import CacheEntry

logger = logging.getLogger(__name__)


class MemoryCache:
    """In-memory resource cache with optional LRU eviction.

    Unbounded by default. With ``max_items`` set, the least recently used
    path is dropped when an insert exceeds the bound.
    """

    def __init__(self, max_items: int | None = None) -> None:
        if max_items is not None and max_items < 1:
            raise ValueError("max_items must be a positive integer")
        self._entries: OrderedDict[str, CacheEntry[Any]] = OrderedDict()
        self._max_items = max_items

    def get(self, path: str) -> CacheEntry[Any] | None:
        entry = self._entries.get(path)
        if entry is not None:
            self._entries.move_to_end(path)  # LRU touch
        return entry

    def set(self, path: str, value: Any) -> None:
        self._entries[path] = CacheEntry(
            value=value, fetched_at=int(time.time() * 1000)
        )
        self._entries.move_to_end(path)
        if self._max_items and len(self._entries) > self._max_items:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(
                "Evicted %s from cache (max_items=%d)", evicted, self._max_items
            )

    def delete(self, path: str) -> None:
        self._entries.pop(path, None)

    def has(self, path: str) -> bool:
        return path in self._entries

    def clear(self) -> None:
        """Drop every cached value."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
