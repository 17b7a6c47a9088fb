"""Shared pytest fixtures."""

from typing import Any

import pytest

from synapse_cache import (
    MemoryCache,
    MemoryResolver,
    Result,
    Subscriber,
    UpdateCoordinator,
    create_coordinator,
)


class Recorder:
    """Notification sink that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def __call__(self, path: str, value: Any) -> None:
        self.calls.append((path, value))


class CountingResolver:
    """Resolver that records calls and replays scripted results per path."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.responses: dict[tuple[str, str], list[Result]] = {}

    def script(self, verb: str, path: str, *results: Result) -> None:
        self.responses.setdefault((verb, path), []).extend(results)

    def count(self, verb: str, path: str) -> int:
        return sum(1 for v, p, _ in self.calls if (v, p) == (verb, path))

    async def execute(self, verb: str, path: str, data: Any = None) -> Result:
        self.calls.append((verb, path, data))
        queue = self.responses.get((verb, path))
        if not queue:
            return Result.ok() if verb != "get" else Result.not_found(path)
        # The last scripted result repeats
        return queue.pop(0) if len(queue) > 1 else queue[0]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def cache() -> MemoryCache:
    """Create a fresh MemoryCache for each test."""
    return MemoryCache()


@pytest.fixture
def resolver() -> CountingResolver:
    return CountingResolver()


@pytest.fixture
def coordinator(resolver: CountingResolver) -> UpdateCoordinator:
    """Create a coordinator over a scripted resolver."""
    return create_coordinator(resolver)


@pytest.fixture
def memory_resolver() -> MemoryResolver:
    return MemoryResolver({"/users/1": {"name": "Alice"}})


@pytest.fixture
def client(recorder: Recorder) -> Subscriber:
    return Subscriber(recorder, id="A")


@pytest.fixture
def make_client():
    """Factory for (subscriber, recorder) pairs."""

    def make(id: str) -> tuple[Subscriber, Recorder]:
        rec = Recorder()
        return Subscriber(rec, id=id), rec

    return make
