"""Update coordinator - keeps the resource cache coherent with the resolver.

The coordinator owns the cache and the subscription graph:
- get(): serve from cache, fetch on miss
- update(): refetch, write the cache, fan out to subscribers
- post(), put(), patch(), delete(): mutate, then refresh in the background
- subscribe(), unsubscribe(): manage subscriber edges

A 404 from a fetch evicts the path, unsubscribes every dependent and
notifies them with None. Concurrent fetches of one path share a single
resolver call.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
from collections.abc import Awaitable, Coroutine
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from synapse_cache.caches.base import ResourceCache
from synapse_cache.caches.memory import MemoryCache
from synapse_cache.duration import to_seconds
from synapse_cache.graph import SubscriptionGraph
from synapse_cache.resolvers.base import Resolver
from synapse_cache.types import Duration, Result, Sink, Subscriber, Verb

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Flight:
    """A fetch in progress for one path."""

    seq: int
    future: asyncio.Future[Result]


class UpdateCoordinator:
    """Orchestrates resolver calls, cache writes and subscriber fan-out."""

    def __init__(
        self,
        resolver: Resolver | None,
        *,
        cache: ResourceCache | None = None,
        timeout: Duration | None = None,
    ) -> None:
        self._resolver = resolver
        self._cache: ResourceCache = cache if cache is not None else MemoryCache()
        self._graph: SubscriptionGraph[Subscriber] = SubscriptionGraph()
        self._timeout = to_seconds(timeout)
        self._seq = itertools.count(1)
        self._in_flight: dict[str, _Flight] = {}
        self._mutated_at: dict[str, int] = {}
        self._background_tasks: set[asyncio.Task[Any]] = set()

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    @property
    def graph(self) -> SubscriptionGraph[Subscriber]:
        return self._graph

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscriber(self, sink: Sink, id: str | None = None) -> Subscriber:
        """Create a subscriber handle for a notification sink."""
        if id is None:
            return Subscriber(sink)
        return Subscriber(sink, id=id)

    def subscribe(self, client: Subscriber, path: str) -> None:
        """Subscribe a client to a path.

        A handle whose id is already subscribed replaces the stored one,
        so its sink receives every later notification.
        """
        self._graph.rebind(client)
        self._graph.subscribe(client, path)

    def unsubscribe(self, client: Subscriber, path: str | None = None) -> None:
        self._graph.unsubscribe(client, path)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(self, path: str) -> Result:
        """Return the cached value for a path, fetching it on a miss."""
        entry = self._cache.get(path)
        if entry is not None:
            return Result.ok(entry.value)
        return await self.update(path)

    async def update(self, path: str) -> Result:
        """Refetch a path and propagate the outcome.

        Success writes the cache and notifies every dependent. A 404
        evicts the path and detaches and notifies every dependent with
        None. Any other error leaves cache and subscriptions untouched.

        Callers arriving while a fetch for the same path is in flight
        share its Result, unless a mutation of the path has completed
        since that fetch began.
        """
        flight = self._in_flight.get(path)
        while flight is not None and self._mutated_at.get(path, 0) < flight.seq:
            logger.debug("Joining in-flight fetch of %s", path)
            try:
                return await asyncio.shield(flight.future)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if not flight.future.cancelled() or (task and task.cancelling()):
                    raise
            # The leading fetch was cancelled, not this caller
            logger.debug("In-flight fetch of %s was cancelled, refetching", path)
            flight = self._in_flight.get(path)

        flight = _Flight(
            seq=next(self._seq),
            future=asyncio.get_running_loop().create_future(),
        )
        self._in_flight[path] = flight
        try:
            result = await self._execute("get", path)
            if self._in_flight.get(path) is flight:
                self._apply(path, result)
            else:
                logger.debug("Discarding superseded fetch of %s", path)
            flight.future.set_result(result)
            return result
        except asyncio.CancelledError:
            flight.future.cancel()
            raise
        except BaseException as e:
            flight.future.set_exception(e)
            raise
        finally:
            if self._in_flight.get(path) is flight:
                del self._in_flight[path]
                self._mutated_at.pop(path, None)

    def invalidate(self, path: str) -> None:
        """Forget the cached value for a path without contacting the resolver."""
        self._cache.delete(path)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def post(self, path: str, data: Any) -> Result:
        return await self._mutate("post", path, data)

    async def put(self, path: str, data: Any) -> Result:
        return await self._mutate("put", path, data)

    async def patch(self, path: str, data: Any) -> Result:
        return await self._mutate("patch", path, data)

    async def delete(self, path: str) -> Result:
        return await self._mutate("delete", path, None)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait for background refreshes and async notifications to finish."""
        while self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def close(self) -> None:
        """Cancel background work and close the resolver."""
        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        aclose = getattr(self._resolver, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> UpdateCoordinator:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    async def _mutate(self, verb: Verb, path: str, data: Any) -> Result:
        result = await self._execute(verb, path, data)
        if result.is_error():
            return result
        if path in self._in_flight:
            self._mutated_at[path] = next(self._seq)
        # Fire and forget - the refresh Result is not returned to the caller
        self._spawn(self.update(path))
        return result

    async def _execute(self, verb: Verb, path: str, data: Any = None) -> Result:
        """Run one resolver call, converting failures into Results."""
        if self._resolver is None:
            logger.warning(
                "No resolver configured, %s %s skipped", verb.upper(), path
            )
            return Result.error(503, "No resolver configured")
        deadline = asyncio.timeout(self._timeout)
        try:
            async with deadline:
                return await self._resolver.execute(verb, path, data)
        except TimeoutError as e:
            if not deadline.expired():
                # Raised by the resolver itself
                logger.exception("Resolver failed on %s %s", verb.upper(), path)
                return Result.error(500, str(e) or type(e).__name__)
            logger.warning(
                "%s %s timed out after %ss", verb.upper(), path, self._timeout
            )
            return Result.error(504, f"Resolver timed out after {self._timeout}s")
        except Exception as e:
            logger.exception("Resolver failed on %s %s", verb.upper(), path)
            return Result.error(500, str(e) or type(e).__name__)

    def _apply(self, path: str, result: Result) -> None:
        """Write the cache and fan out. Never suspends."""
        if not result.is_error():
            self._cache.set(path, result.payload)
            dependents = self._graph.dependents_of(path)
            logger.debug(
                "Updated %s, notifying %d subscriber(s)", path, len(dependents)
            )
            for client in dependents:
                self._notify(client, path, result.payload)
        elif result.is_not_found:
            self._cache.delete(path)
            dependents = self._graph.remove_path(path)
            logger.debug(
                "Evicted %s, detached %d subscriber(s)", path, len(dependents)
            )
            for client in dependents:
                self._notify(client, path, None)
        else:
            logger.debug(
                "Fetch of %s returned %d, state unchanged", path, result.status
            )

    def _notify(self, client: Subscriber, path: str, value: Any) -> None:
        try:
            outcome = client.sink(path, value)
        except Exception:
            logger.exception("Subscriber %r failed on %s", client, path)
            return
        if inspect.isawaitable(outcome):
            self._spawn(self._await_sink(client, path, outcome))

    async def _await_sink(
        self, client: Subscriber, path: str, outcome: Awaitable[Any]
    ) -> None:
        try:
            await outcome
        except Exception:
            logger.exception("Subscriber %r failed on %s", client, path)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)


def create_coordinator(
    resolver: Resolver | None,
    *,
    cache: ResourceCache | None = None,
    max_items: int | None = None,
    timeout: Duration | None = None,
) -> UpdateCoordinator:
    """Create an update coordinator.

    Args:
        resolver: Source of truth for resource values
        cache: Custom cache (default: MemoryCache)
        max_items: LRU bound for the default MemoryCache
        timeout: Per-call resolver timeout (default: none)

    Returns:
        UpdateCoordinator with get, update, post, put, patch, delete,
        subscribe, unsubscribe
    """
    if cache is not None and max_items is not None:
        raise ValueError("max_items only applies to the default MemoryCache")
    if cache is not None and not isinstance(cache, ResourceCache):
        raise TypeError(f"Expected a ResourceCache, got {type(cache)}")
    if cache is None:
        cache = MemoryCache(max_items=max_items)

    return UpdateCoordinator(resolver, cache=cache, timeout=timeout)


__all__ = ["UpdateCoordinator", "create_coordinator"]
