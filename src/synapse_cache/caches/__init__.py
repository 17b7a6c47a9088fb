"""Resource caches for synapse-cache."""

from synapse_cache.caches.base import ResourceCache
from synapse_cache.caches.memory import MemoryCache

__all__ = [
    "MemoryCache",
    "ResourceCache",
]
