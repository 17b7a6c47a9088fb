"""synapse-cache - Resource cache and subscription manager for Python."""

from contextlib import suppress

# Caches
from synapse_cache.caches import MemoryCache, ResourceCache

# Coordinator API
from synapse_cache.coordinator import UpdateCoordinator, create_coordinator

# Duration parsing
from synapse_cache.duration import parse_duration
from synapse_cache.graph import SubscriptionGraph

# Resolvers
from synapse_cache.resolvers import FunctionResolver, MemoryResolver, Resolver

# Core types
from synapse_cache.types import (
    CacheEntry,
    Duration,
    Result,
    Sink,
    Subscriber,
    Verb,
)

# Optional resolver imports - only available when dependencies are installed
with suppress(ImportError):
    from synapse_cache.resolvers import HttpResolver

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "Duration",
    "FunctionResolver",
    "HttpResolver",
    "MemoryCache",
    "MemoryResolver",
    "Resolver",
    "ResourceCache",
    "Result",
    "Sink",
    "Subscriber",
    "SubscriptionGraph",
    "UpdateCoordinator",
    "Verb",
    "create_coordinator",
    "parse_duration",
]
