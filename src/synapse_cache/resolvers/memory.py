"""In-process resolver over a dict of resources."""

import copy
from collections.abc import Mapping
from typing import Any

from synapse_cache.types import Result, Verb


class MemoryResolver:
    """Dict-backed resource store speaking the Resolver protocol.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._resources: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def execute(self, verb: Verb, path: str, data: Any = None) -> Result:
        if verb == "get":
            return self._get(path)
        if verb == "post":
            return self._post(path, data)
        if verb == "put":
            return self._put(path, data)
        if verb == "patch":
            return self._patch(path, data)
        if verb == "delete":
            return self._delete(path)
        return Result.error(405, f"Unsupported verb: {verb}")

    def _get(self, path: str) -> Result:
        if path not in self._resources:
            return Result.not_found(path)
        return Result.ok(copy.deepcopy(self._resources[path]))

    def _post(self, path: str, data: Any) -> Result:
        if path in self._resources:
            return Result.error(409, f"Resource already exists: {path}")
        self._resources[path] = copy.deepcopy(data)
        return Result.created(copy.deepcopy(data))

    def _put(self, path: str, data: Any) -> Result:
        existed = path in self._resources
        self._resources[path] = copy.deepcopy(data)
        if existed:
            return Result.ok(copy.deepcopy(data))
        return Result.created(copy.deepcopy(data))

    def _patch(self, path: str, data: Any) -> Result:
        if path not in self._resources:
            return Result.not_found(path)
        current = self._resources[path]
        if not isinstance(current, Mapping) or not isinstance(data, Mapping):
            return Result.error(400, "Patch requires mapping values")
        merged = {**current, **copy.deepcopy(dict(data))}
        self._resources[path] = merged
        return Result.ok(copy.deepcopy(merged))

    def _delete(self, path: str) -> Result:
        if path not in self._resources:
            return Result.not_found(path)
        del self._resources[path]
        return Result.ok()

    def __contains__(self, path: object) -> bool:
        return path in self._resources

    def __len__(self) -> int:
        return len(self._resources)
