"""Base cache protocol for resource values."""

from typing import Any, Protocol, runtime_checkable

from synapse_cache.types import CacheEntry


@runtime_checkable
class ResourceCache(Protocol):
    """Synchronous path -> last-known value store.

    Methods are synchronous so that writing a value and notifying
    subscribers happen without an intervening suspension point.
    """

    def get(self, path: str) -> CacheEntry[Any] | None:
        """Get the entry for a path, or None when nothing is cached."""
        ...

    def set(self, path: str, value: Any) -> None:
        """Store the last-known value for a path."""
        ...

    def delete(self, path: str) -> None:
        """Forget a path. Missing paths are ignored."""
        ...

    def has(self, path: str) -> bool:
        """Whether a value is cached for a path."""
        ...
