"""Resolvers for synapse-cache."""

from contextlib import suppress

from synapse_cache.resolvers.base import Resolver
from synapse_cache.resolvers.function import FunctionResolver
from synapse_cache.resolvers.memory import MemoryResolver

# Optional resolvers - only available when dependencies are installed
with suppress(ImportError):
    from synapse_cache.resolvers.http import HttpResolver

__all__ = [
    "FunctionResolver",
    "HttpResolver",
    "MemoryResolver",
    "Resolver",
]
