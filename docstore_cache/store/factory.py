"""
docstore-cache — Store Factory

Canonical factory for creating document store handles from configuration.

Key points:
- Handles are registered by instance name; asking twice returns the same handle
- Redis is imported lazily so the memory backend works without it installed
- All configuration is typed and validated via Pydantic models

Examples:
    from docstore_cache.store.factory import create_store

    store = create_store()  # env-configured backend (memory by default)

    from docstore_cache.config import StoreBackend, StoreConfig
    cfg = StoreConfig(backend=StoreBackend.REDIS, redis_url="redis://localhost:6379/0")
    redis_store = create_store(cfg, name="shared")
"""

from __future__ import annotations

import logging

from ..config import StoreBackend, StoreConfig, get_config
from ..errors import ConfigurationError
from .backends.memory import MemoryDocumentStore
from .interface import DocumentStore

logger = logging.getLogger(__name__)

# Global store instances registry
_store_instances: dict[str, DocumentStore] = {}


def _create_redis_store(config: StoreConfig) -> DocumentStore:
    """Internal helper to construct a redis store with lazy import."""
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when STORE_BACKEND=redis",
            details={"env": "REDIS_URL", "backend": "redis"},
        )

    try:
        from .backends.redis import RedisDocumentStore
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis backend selected but redis client is unavailable. "
            "Install with: pip install 'redis>=5.0.0' or add to dependencies.",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    return RedisDocumentStore(
        redis_url=config.redis_url,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


def create_store(
    config: StoreConfig | None = None,
    name: str = "default",
) -> DocumentStore:
    """
    Create a document store handle based on configuration.

    Args:
        config: Store configuration (uses global config if not provided)
        name: Store instance name

    Returns:
        Configured store handle

    Raises:
        ConfigurationError: If store configuration is invalid or backend unavailable
    """
    if name in _store_instances:
        logger.debug("Returning existing store instance: %s", name)
        return _store_instances[name]

    if config is None:
        config = get_config().store

    logger.info(
        "Creating store instance '%s' with backend: %s",
        name,
        config.backend,
        extra={"store_name": name, "backend": str(config.backend)},
    )

    if config.backend == StoreBackend.MEMORY:
        store: DocumentStore = MemoryDocumentStore(name=name)
    elif config.backend == StoreBackend.REDIS:
        store = _create_redis_store(config)
    else:
        raise ConfigurationError(
            f"Unknown store backend: {config.backend}",
            details={"backend": str(config.backend), "supported": ["memory", "redis"]},
        )

    _store_instances[name] = store
    return store


def get_store(name: str = "default") -> DocumentStore:
    """Get a store instance by name, creating it from the global config if missing."""
    if name not in _store_instances:
        logger.debug("Store instance '%s' not found, creating new instance", name)
        return create_store(name=name)

    return _store_instances[name]


async def close_all_stores() -> None:
    """Close all store instances and release resources."""
    if not _store_instances:
        logger.debug("No store instances to close")
        return

    logger.info("Closing %d store instance(s)...", len(_store_instances))

    for name, store in list(_store_instances.items()):
        try:
            await store.close()
            logger.info("Closed store instance: %s", name)
        except Exception as e:
            logger.error(
                "Error closing store instance '%s': %s",
                name,
                e,
                extra={"store_name": name, "error": str(e)},
                exc_info=True,
            )

    _store_instances.clear()


def reset_store_factory() -> None:
    """
    Forget all store instances without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_store_instances)
    _store_instances.clear()
    logger.debug("Reset store factory, cleared %d instance reference(s)", count)


def list_store_instances() -> list[str]:
    """List all registered store instance names."""
    return list(_store_instances.keys())
