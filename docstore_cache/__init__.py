"""
docstore-cache — Named caches over a shared document store

Exposes a document store (memory or Redis) through a generic cache
interface, namespacing each cache's entries so they can be cleared
independently.
"""

__version__ = "1.0.0"

from .cache import CacheRegistry, NamespacedCache, ValueWrapper, create_registry
from .errors import DocstoreCacheError, InvalidValueError
from .store import DocumentStore, create_store

__all__ = [
    "CacheRegistry",
    "NamespacedCache",
    "ValueWrapper",
    "create_registry",
    "DocumentStore",
    "create_store",
    "DocstoreCacheError",
    "InvalidValueError",
]
