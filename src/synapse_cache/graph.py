"""Bidirectional subscription index between clients and resource paths."""

from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

C = TypeVar("C", bound=Hashable)


class SubscriptionGraph(Generic[C]):
    """Many-to-many relation between clients and resource paths.

    Each edge is recorded twice, once per direction, so lookups are
    constant time both ways. Every mutation updates both directions
    together: a client is a dependent of a path if and only if the path
    is one of the client's subscriptions. Empty sets are pruned.
    """

    def __init__(self) -> None:
        self._dependents: dict[str, set[C]] = {}
        self._subscriptions: dict[C, set[str]] = {}

    def subscribe(self, client: C, path: str) -> None:
        """Add the (client, path) edge. Repeated calls are no-ops."""
        self._subscriptions.setdefault(client, set()).add(path)
        self._dependents.setdefault(path, set()).add(client)

    def unsubscribe(self, client: C, path: str | None = None) -> None:
        """Remove one edge, or every edge of ``client`` when path is None."""
        subscriptions = self._subscriptions.get(client)
        if not subscriptions:
            return
        targets = [path] if path is not None else list(subscriptions)
        for target in targets:
            if target not in subscriptions:
                continue
            subscriptions.discard(target)
            self._discard_dependent(target, client)
        if not subscriptions:
            del self._subscriptions[client]

    def rebind(self, client: C) -> None:
        """Store ``client`` in place of the equal handle already recorded."""
        paths = self._subscriptions.pop(client, None)
        if paths is None:
            return
        self._subscriptions[client] = paths
        for path in paths:
            dependents = self._dependents[path]
            dependents.discard(client)
            dependents.add(client)

    def remove_path(self, path: str) -> frozenset[C]:
        """Detach every dependent of ``path`` and return them."""
        dependents = self._dependents.pop(path, set())
        for client in dependents:
            subscriptions = self._subscriptions[client]
            subscriptions.discard(path)
            if not subscriptions:
                del self._subscriptions[client]
        return frozenset(dependents)

    def dependents_of(self, path: str) -> frozenset[C]:
        return frozenset(self._dependents.get(path, ()))

    def subscriptions_of(self, client: C) -> frozenset[str]:
        return frozenset(self._subscriptions.get(client, ()))

    def is_subscribed(self, client: C, path: str) -> bool:
        return path in self._subscriptions.get(client, ())

    def paths(self) -> Iterator[str]:
        """Paths with at least one dependent."""
        return iter(list(self._dependents))

    def clients(self) -> Iterator[C]:
        """Clients with at least one subscription."""
        return iter(list(self._subscriptions))

    def __contains__(self, client: object) -> bool:
        return client in self._subscriptions

    def __len__(self) -> int:
        """Number of edges."""
        return sum(len(paths) for paths in self._subscriptions.values())

    def _discard_dependent(self, path: str, client: C) -> None:
        dependents = self._dependents.get(path)
        if dependents is None:
            return
        dependents.discard(client)
        if not dependents:
            del self._dependents[path]
