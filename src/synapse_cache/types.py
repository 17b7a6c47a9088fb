"""Core types for synapse-cache."""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

Verb = Literal["get", "post", "put", "patch", "delete"]
VERBS: tuple[Verb, ...] = ("get", "post", "put", "patch", "delete")

# A sink receives (path, value); value is None when the resource was evicted
Sink = Callable[[str, Any], None | Awaitable[None]]

# Duration type alias
Duration = str | int  # "250ms", "5s", "2m" or milliseconds


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of a resolver operation."""

    status: int
    payload: Any = None

    def is_error(self) -> bool:
        """True for any status outside the 2xx range."""
        return not 200 <= self.status < 300

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @classmethod
    def ok(cls, payload: Any = None) -> "Result":
        return cls(200, payload)

    @classmethod
    def created(cls, payload: Any = None) -> "Result":
        return cls(201, payload)

    @classmethod
    def not_found(cls, path: str | None = None) -> "Result":
        return cls(404, {"error": "Not found", "path": path} if path else None)

    @classmethod
    def error(cls, status: int, message: str) -> "Result":
        """Build an error result carrying a message payload."""
        if 200 <= status < 300:
            raise ValueError(f"{status} is not an error status")
        return cls(status, {"error": message})


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached resource value."""

    value: T
    fetched_at: int  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class Subscriber:
    """Handle for one subscribing client.

    Identity is the ``id`` alone; the sink is the registered notification
    target and takes no part in equality or hashing. Subscribing a new
    handle with a known id rebinds every subscription of that id to the
    new sink.
    """

    sink: Sink = field(compare=False)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __repr__(self) -> str:
        return f"Subscriber({self.id!r})"
