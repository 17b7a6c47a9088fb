"""Base resolver protocol."""

from typing import Any, Protocol, runtime_checkable

from synapse_cache.types import Result, Verb


@runtime_checkable
class Resolver(Protocol):
    """Executes CRUD requests against the source of truth."""

    async def execute(self, verb: Verb, path: str, data: Any = None) -> Result:
        """Run ``verb`` on ``path`` and describe the outcome as a Result."""
        ...
