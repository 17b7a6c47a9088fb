"""Resolver backed by a plain or async callable."""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from synapse_cache.types import Result, Verb

Handler = Callable[[Verb, str, Any], Result | Awaitable[Result]]


class FunctionResolver:
    """Adapts a request handler ``fn(verb, path, data)`` to the Resolver protocol.

    The handler may be sync or async and must return a Result.
    """

    def __init__(self, fn: Handler) -> None:
        if not callable(fn):
            raise TypeError(f"Expected a callable handler, got {type(fn)}")
        self._fn = fn

    async def execute(self, verb: Verb, path: str, data: Any = None) -> Result:
        result = self._fn(verb, path, data)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, Result):
            raise TypeError(
                f"Handler for {verb} {path} returned {type(result).__name__}, "
                "expected Result"
            )
        return result
