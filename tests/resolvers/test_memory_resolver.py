"""Tests for the in-memory resolver."""

from synapse_cache import MemoryResolver, Resolver


class TestMemoryResolver:
    """Tests for MemoryResolver verbs."""

    async def test_get(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("get", "/users/1")
        assert result.status == 200
        assert result.payload == {"name": "Alice"}

    async def test_get_missing(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("get", "/users/2")
        assert result.is_not_found

    async def test_post_creates(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("post", "/users/2", {"name": "Bob"})
        assert result.status == 201
        assert "/users/2" in memory_resolver

    async def test_post_conflict(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("post", "/users/1", {"name": "Bob"})
        assert result.status == 409
        got = await memory_resolver.execute("get", "/users/1")
        assert got.payload == {"name": "Alice"}

    async def test_put_replaces_or_creates(
        self, memory_resolver: MemoryResolver
    ) -> None:
        replaced = await memory_resolver.execute("put", "/users/1", {"name": "Bob"})
        created = await memory_resolver.execute("put", "/users/2", {"name": "Eve"})
        assert replaced.status == 200
        assert created.status == 201
        assert len(memory_resolver) == 2

    async def test_patch_merges(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("patch", "/users/1", {"age": 30})
        assert result.status == 200
        assert result.payload == {"name": "Alice", "age": 30}

    async def test_patch_missing(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("patch", "/users/9", {"age": 30})
        assert result.is_not_found

    async def test_patch_requires_mappings(self) -> None:
        resolver = MemoryResolver({"/count": 1})
        result = await resolver.execute("patch", "/count", {"value": 2})
        assert result.status == 400

    async def test_delete(self, memory_resolver: MemoryResolver) -> None:
        first = await memory_resolver.execute("delete", "/users/1")
        second = await memory_resolver.execute("delete", "/users/1")
        assert first.status == 200
        assert second.is_not_found

    async def test_values_are_copied(self, memory_resolver: MemoryResolver) -> None:
        result = await memory_resolver.execute("get", "/users/1")
        result.payload["name"] = "Mallory"
        again = await memory_resolver.execute("get", "/users/1")
        assert again.payload == {"name": "Alice"}

    def test_satisfies_protocol(self, memory_resolver: MemoryResolver) -> None:
        assert isinstance(memory_resolver, Resolver)
