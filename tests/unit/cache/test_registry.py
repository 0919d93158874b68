"""
docstore-cache — Cache Registry Tests

Tests cache construction from handle and TTL mappings, lazy loading, and
building a registry from configuration.
"""

import asyncio
import logging

import pytest

from docstore_cache.cache.namespaced import NamespacedCache
from docstore_cache.cache.registry import CacheRegistry, create_registry
from docstore_cache.config import CacheConfig, RegistryConfig, StoreConfig
from docstore_cache.observability import JSONFormatter
from docstore_cache.store.backends.memory import MemoryDocumentStore
from docstore_cache.store.views import DesignDocument


class YieldingDocumentStore(MemoryDocumentStore):
    """Memory store that suspends on design document reads, like a networked store."""

    def __init__(self) -> None:
        super().__init__(name="yielding")
        self.design_reads = 0

    async def get_design_document(self, name: str) -> DesignDocument:
        self.design_reads += 1
        await asyncio.sleep(0)
        return await super().get_design_document(name)


class TestCacheRegistry:
    """Test suite for CacheRegistry."""

    async def test_load_caches_one_per_client(self) -> None:
        users_store = MemoryDocumentStore("users")
        shared = MemoryDocumentStore("shared")
        registry = CacheRegistry({"users": users_store, "sessions": shared, "tokens": shared})

        caches = await registry.load_caches()

        assert [cache.name for cache in caches] == ["users", "sessions", "tokens"]
        assert all(isinstance(cache, NamespacedCache) for cache in caches)
        assert caches[0].native_cache is users_store
        assert caches[1].native_cache is shared
        assert caches[2].native_cache is shared

    async def test_ttl_lookup_defaults_to_zero(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store, "sessions": store}, {"sessions": 900})

        assert registry.get_ttl("sessions") == 900
        assert registry.get_ttl("users") == 0
        assert registry.get_ttl("unknown") == 0

        caches = {cache.name: cache for cache in await registry.load_caches()}
        assert caches["sessions"].ttl == 900
        assert caches["users"].ttl == 0

    async def test_ttl_for_unregistered_name_is_ignored(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store}, {"ghost": 60})

        caches = await registry.load_caches()

        assert [cache.name for cache in caches] == ["users"]

    async def test_clients_are_read_only(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store})

        assert registry.clients["users"] is store
        with pytest.raises(TypeError):
            registry.clients["other"] = store  # type: ignore[index]

    async def test_input_mapping_is_copied(self, store: MemoryDocumentStore) -> None:
        clients = {"users": store}
        registry = CacheRegistry(clients)

        clients["late"] = store

        assert registry.cache_names == ["users"]

    async def test_get_cache_loads_lazily(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store})

        cache = await registry.get_cache("users")

        assert cache is not None and cache.name == "users"
        assert await registry.get_cache("unknown") is None

    async def test_load_caches_is_idempotent(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store})

        first = await registry.load_caches()
        second = await registry.load_caches()

        assert first[0] is second[0]
        assert await registry.get_cache("users") is first[0]

    async def test_loading_creates_names_view(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store})

        await registry.load_caches()

        assert (await store.get_stats())["design_documents"] == 1

    async def test_always_flush_names(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store, "scratch": store}, always_flush=["scratch"])

        scratch = await registry.get_cache("scratch")
        users = await registry.get_cache("users")

        assert scratch is not None and scratch.always_flush is True
        assert users is not None and users.always_flush is False

    async def test_always_flush_true_applies_to_every_cache(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store, "scratch": store}, always_flush=True)

        caches = await registry.load_caches()

        assert [cache.always_flush for cache in caches] == [True, True]
        # Always-flush caches never query the names view
        assert (await store.get_stats())["design_documents"] == 0

    async def test_always_flush_false_applies_to_no_cache(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store, "scratch": store}, always_flush=False)

        caches = await registry.load_caches()

        assert [cache.always_flush for cache in caches] == [False, False]

    async def test_concurrent_first_lookups_share_caches(self) -> None:
        store = YieldingDocumentStore()
        registry = CacheRegistry({"users": store, "sessions": store})

        first, second = await asyncio.gather(registry.get_cache("users"), registry.get_cache("users"))

        assert first is not None and first is second
        assert store.design_reads == 2  # one initialize() per cache

        first.always_flush = True
        again = await registry.get_cache("users")
        assert again is first and again.always_flush is True

    async def test_caches_do_not_overwrite_each_other(self, store: MemoryDocumentStore) -> None:
        registry = CacheRegistry({"users": store, "sessions": store})
        users = await registry.get_cache("users")
        sessions = await registry.get_cache("sessions")
        assert users is not None and sessions is not None

        await users.put("42", "user")
        await sessions.put("42", "session")

        assert await users.get("42") == "user"
        assert await sessions.get("42") == "session"


class TestCreateRegistry:
    """Test suite for building a registry from configuration."""

    async def test_from_explicit_config(self) -> None:
        config = RegistryConfig(
            store=StoreConfig(backend="memory"),
            caches={
                "users": CacheConfig(),
                "sessions": CacheConfig(ttl_seconds=900),
                "scratch": CacheConfig(always_flush=True),
            },
        )

        registry = create_registry(config)
        caches = {cache.name: cache for cache in await registry.load_caches()}

        assert set(caches) == {"users", "sessions", "scratch"}
        assert caches["sessions"].ttl == 900
        assert caches["scratch"].always_flush is True
        # All caches share the configured store handle
        assert len({id(store) for store in registry.clients.values()}) == 1

    async def test_from_environment(self, mock_env_memory: None) -> None:
        registry = create_registry()

        assert registry.cache_names == ["users", "sessions", "scratch"]
        assert registry.get_ttl("sessions") == 900
        scratch = await registry.get_cache("scratch")
        assert scratch is not None and scratch.always_flush is True

    async def test_configures_package_logging(self) -> None:
        registry = create_registry(RegistryConfig(log_level="WARNING", caches={"users": CacheConfig()}))

        package_logger = logging.getLogger("docstore_cache")
        assert registry.cache_names == ["users"]
        assert package_logger.level == logging.WARNING
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)
