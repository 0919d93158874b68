"""
docstore-cache — Cache Registry

Orchestrates NamespacedCache instances. Each registered name is bound to a
store handle (several names may share one handle) and an optional TTL.

Examples:
    registry = CacheRegistry({"users": store, "sessions": store}, {"sessions": 900})
    sessions = await registry.get_cache("sessions")

    # Or from environment configuration (CACHE_NAMES, CACHE_TTLS, ...)
    registry = create_registry()
    await registry.load_caches()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..config import RegistryConfig, get_config
from ..observability import configure_logging
from ..store.factory import create_store
from ..store.interface import DocumentStore
from .namespaced import NamespacedCache

logger = logging.getLogger(__name__)


class CacheRegistry:
    """
    Registry of named caches backed by document stores.

    The registry owns the name -> handle and name -> TTL mappings; the store
    handles themselves stay owned by the caller.
    """

    def __init__(
        self,
        clients: Mapping[str, DocumentStore],
        ttl_configuration: Mapping[str, int] | None = None,
        always_flush: bool | Iterable[str] = False,
    ):
        """
        Initialize the registry.

        Args:
            clients: Cache name -> store handle
            ttl_configuration: Cache name -> TTL in seconds (missing names get 0)
            always_flush: True to make every cache flush the whole store on
                clear(), or the names of the caches that should
        """
        self._clients = dict(clients)
        self._ttl_configuration = dict(ttl_configuration or {})
        if isinstance(always_flush, bool):
            self._always_flush = frozenset(self._clients) if always_flush else frozenset()
        else:
            self._always_flush = frozenset(always_flush)
        self._caches: dict[str, NamespacedCache] | None = None
        self._load_lock = asyncio.Lock()

    @property
    def clients(self) -> Mapping[str, DocumentStore]:
        """Read-only view of the registered store handles by cache name."""
        return MappingProxyType(self._clients)

    @property
    def cache_names(self) -> list[str]:
        return list(self._clients)

    def get_ttl(self, name: str) -> int:
        """Return the configured TTL for ``name``, or 0 when none is set."""
        return self._ttl_configuration.get(name, 0)

    async def load_caches(self) -> list[NamespacedCache]:
        """Build one cache per registered handle. Later calls return the same caches."""
        caches = await self._loaded_caches()
        return list(caches.values())

    async def get_cache(self, name: str) -> NamespacedCache | None:
        """Return the cache registered as ``name``, or None if there is none."""
        caches = await self._loaded_caches()
        return caches.get(name)

    async def _loaded_caches(self) -> dict[str, NamespacedCache]:
        if self._caches is not None:
            return self._caches

        # Concurrent first callers wait here and share one set of caches
        async with self._load_lock:
            if self._caches is None:
                caches: dict[str, NamespacedCache] = {}
                for name, store in self._clients.items():
                    cache = NamespacedCache(
                        name,
                        store,
                        ttl=self.get_ttl(name),
                        always_flush=name in self._always_flush,
                    )
                    await cache.initialize()
                    caches[name] = cache

                self._caches = caches
                logger.info(
                    f"Loaded {len(caches)} cache(s)",
                    extra={"cache_names": list(caches)},
                )

            return self._caches


def create_registry(config: RegistryConfig | None = None) -> CacheRegistry:
    """
    Build a registry from configuration.

    All configured caches share the store handle created for the configured
    backend. The package JSON log handler is set to the configured log level.

    Args:
        config: Registry configuration (uses global config if not provided)
    """
    if config is None:
        config = get_config()

    configure_logging(config.log_level)

    store = create_store(config.store)
    return CacheRegistry(
        {name: store for name in config.caches},
        ttl_configuration=config.ttl_configuration(),
        always_flush=config.always_flush_names(),
    )
