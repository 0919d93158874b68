"""
docstore-cache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import logging
import os
from collections.abc import Generator
from typing import Any

import pytest

from docstore_cache.store.backends.memory import MemoryDocumentStore

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def store() -> MemoryDocumentStore:
    """A fresh in-memory document store."""
    return MemoryDocumentStore(name="test")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample JSON-compatible values for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Environment for a memory-backed registry with three caches."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_NAMES", "users,sessions")
    monkeypatch.setenv("CACHE_TTLS", "sessions=900")
    monkeypatch.setenv("CACHE_ALWAYS_FLUSH", "scratch")


@pytest.fixture(autouse=True)
def reset_factories() -> Generator[None, None, None]:
    """Reset factory and config singletons plus the package logger after each test."""
    yield
    from docstore_cache.config import loader
    from docstore_cache.store.factory import reset_store_factory

    reset_store_factory()
    loader._config_instance = None

    package_logger = logging.getLogger("docstore_cache")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
