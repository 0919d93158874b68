"""
docstore-cache — Store Factory Integration Tests

Tests store creation, singleton behavior, and lifecycle management.
"""

from collections.abc import AsyncGenerator

import pytest

from docstore_cache.config import StoreBackend, StoreConfig
from docstore_cache.errors import ConfigurationError
from docstore_cache.store.backends.memory import MemoryDocumentStore
from docstore_cache.store.factory import (
    close_all_stores,
    create_store,
    get_store,
    list_store_instances,
    reset_store_factory,
)
from docstore_cache.store.interface import DocumentStore


class TestStoreFactory:
    """Test suite for store factory functionality."""

    @pytest.fixture(autouse=True)
    async def cleanup(self) -> AsyncGenerator[None, None]:
        yield
        await close_all_stores()
        reset_store_factory()

    async def test_create_memory_store(self) -> None:
        store = create_store(StoreConfig(backend=StoreBackend.MEMORY))

        assert isinstance(store, MemoryDocumentStore)
        await store.upsert("doc", "value")
        assert await store.get("doc") == "value"

    async def test_create_redis_store_without_connecting(self) -> None:
        """The Redis client connects lazily, so creation works without a server."""
        from docstore_cache.store.backends.redis import RedisDocumentStore

        config = StoreConfig(backend=StoreBackend.REDIS, redis_url="redis://localhost:6379/15")

        store = create_store(config, name="redis")

        assert isinstance(store, RedisDocumentStore)
        reset_store_factory()

    async def test_redis_config_without_url(self) -> None:
        config = StoreConfig.model_construct(backend=StoreBackend.REDIS, redis_url=None)

        with pytest.raises(ConfigurationError):
            create_store(config, name="broken")

        assert "broken" not in list_store_instances()

    async def test_unknown_backend(self) -> None:
        config = StoreConfig.model_construct(backend="couchbase", redis_url=None)

        with pytest.raises(ConfigurationError) as exc_info:
            create_store(config, name="unknown")

        assert exc_info.value.details["supported"] == ["memory", "redis"]
        assert "unknown" not in list_store_instances()

    async def test_singleton_behavior(self) -> None:
        config = StoreConfig()

        assert create_store(config, name="shared") is create_store(config, name="shared")

    async def test_multiple_named_instances(self) -> None:
        config = StoreConfig()

        first = create_store(config, name="one")
        second = create_store(config, name="two")

        assert first is not second
        assert sorted(list_store_instances()) == ["one", "two"]

    async def test_get_store_creates_from_global_config(self, mock_env_memory: None) -> None:
        store = get_store("fresh")

        assert isinstance(store, DocumentStore)
        assert get_store("fresh") is store

    async def test_close_all_stores(self) -> None:
        create_store(StoreConfig(), name="a")
        create_store(StoreConfig(), name="b")

        await close_all_stores()

        assert list_store_instances() == []

    async def test_close_errors_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        store = create_store(StoreConfig(), name="faulty")

        async def failing_close() -> None:
            raise RuntimeError("boom")

        store.close = failing_close  # type: ignore[method-assign]

        await close_all_stores()

        assert "boom" in caplog.text
        assert list_store_instances() == []
