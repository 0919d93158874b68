"""
docstore-cache — Cache Module

Named caches over shared document stores.

Usage:
    from docstore_cache.cache import create_registry

    registry = create_registry()
    users = await registry.get_cache("users")
    await users.put("42", {"name": "Ada"})
"""

from .interface import CacheInterface, ValueWrapper
from .namespaced import (
    CACHE_DESIGN_DOCUMENT,
    CACHE_PREFIX,
    CACHE_VIEW,
    DELIMITER,
    NamespacedCache,
    document_id,
    names_view,
)
from .registry import CacheRegistry, create_registry

__all__ = [
    # Registry
    "CacheRegistry",
    "create_registry",
    # Caches
    "CacheInterface",
    "NamespacedCache",
    "ValueWrapper",
    # Document id scheme
    "document_id",
    "names_view",
    "CACHE_PREFIX",
    "DELIMITER",
    "CACHE_DESIGN_DOCUMENT",
    "CACHE_VIEW",
]
