"""
docstore-cache — Store Module

Document store handles the cache layer delegates to.

Usage:
    from docstore_cache.store import create_store

    store = create_store()
    await store.upsert("cache:users:42", {"name": "Ada"}, ttl=60)
"""

from .factory import (
    close_all_stores,
    create_store,
    get_store,
    list_store_instances,
    reset_store_factory,
)
from .interface import DocumentStore, ViewRow
from .views import DesignDocument, View

__all__ = [
    # Factory functions
    "create_store",
    "get_store",
    "close_all_stores",
    "list_store_instances",
    "reset_store_factory",
    # Interface
    "DocumentStore",
    "ViewRow",
    # Index metadata
    "DesignDocument",
    "View",
]
