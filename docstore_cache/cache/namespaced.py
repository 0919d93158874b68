"""
docstore-cache — Namespaced Cache

Cache implementation over a shared document store. Several caches can share
one store: every entry lives under a document id of the form
``cache:<name>:<key>`` (``cache::<key>`` for an unnamed cache), and a view
keyed by cache name lets clear() remove one cache's documents without
touching the others.

Example:
    store = MemoryDocumentStore()
    users = NamespacedCache("users", store, ttl=300)
    await users.initialize()
    await users.put(42, {"name": "Ada"})
    await users.get(42)
    await users.clear()  # removes cache:users:* only
"""

import logging
from typing import Any, TypeVar

from ..errors import FlushError
from ..serialization import coerce
from ..store.interface import DocumentStore
from ..store.views import DesignDocument, View
from .interface import CacheInterface, ValueWrapper

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Separates prefix, cache name and key in document ids
DELIMITER = ":"

# First token of every document id written by a NamespacedCache
CACHE_PREFIX = "cache"

# Design document and view used to find the documents of one cache
CACHE_DESIGN_DOCUMENT = "cache"
CACHE_VIEW = "names"


def is_blank(name: str | None) -> bool:
    return name is None or not name.strip()


def document_id(name: str | None, key: Any) -> str:
    """
    Build the document id for ``key`` in the cache called ``name``.

    Returns ``cache:<name>:<key>``, or ``cache::<key>`` when the name is
    None, empty or whitespace.
    """
    if is_blank(name):
        return f"{CACHE_PREFIX}{DELIMITER}{DELIMITER}{key}"
    return f"{CACHE_PREFIX}{DELIMITER}{name}{DELIMITER}{key}"


def names_view() -> View:
    """The view emitting the cache name of every cache document."""
    return View(name=CACHE_VIEW, prefix=CACHE_PREFIX, delimiter=DELIMITER, emit_token=1, min_tokens=3)


class NamespacedCache(CacheInterface):
    """
    Cache bound to one name within a shared document store.

    Notes:
    - put_if_absent() is a read followed by a write, not an atomic insert.
    - clear() flushes the WHOLE store when always_flush is set or the name is
      blank. Otherwise it removes only the documents the names view lists for
      this cache.
    - A failed flush is logged and swallowed. All other store errors propagate.
    """

    def __init__(
        self,
        name: str | None,
        store: DocumentStore,
        ttl: int = 0,
        always_flush: bool = False,
    ):
        """
        Initialize a namespaced cache.

        Args:
            name: Cache name (None or blank for the unnamed cache)
            store: Store handle, shared with other caches and owned by the caller
            ttl: Document TTL in seconds (0 = no expiry)
            always_flush: Flush the whole store on clear()
        """
        if ttl < 0:
            raise ValueError("ttl must be >= 0")

        self._name = name
        self._store = store
        self._ttl = int(ttl)
        self._always_flush = always_flush
        self._index_ready = False

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def native_cache(self) -> DocumentStore:
        return self._store

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def always_flush(self) -> bool:
        """Whether clear() flushes the whole store."""
        return self._always_flush

    @always_flush.setter
    def always_flush(self, value: bool) -> None:
        self._always_flush = bool(value)

    def document_id(self, key: Any) -> str:
        return document_id(self._name, key)

    async def initialize(self) -> None:
        """Make sure the names view exists unless this cache always flushes."""
        if not self._always_flush:
            await self.ensure_index()

    async def get(self, key: Any, type_: type[T] | None = None) -> Any | None:
        value = await self._store.get(self.document_id(key))
        if value is None or type_ is None:
            return value
        return coerce(value, type_)

    async def put(self, key: Any, value: Any) -> None:
        if value is None:
            await self.evict(key)
            return

        # The store rejects values it cannot serialize with InvalidValueError
        await self._store.upsert(self.document_id(key), value, ttl=self._ttl)

    async def put_if_absent(self, key: Any, value: Any) -> ValueWrapper | None:
        if await self.get(key) is None:
            await self.put(key, value)
            return None

        # Wraps the supplied value, not the stored one
        return ValueWrapper(value)

    async def evict(self, key: Any) -> None:
        await self._store.remove(self.document_id(key))

    async def clear(self) -> None:
        """
        Clear the cache.

        Destructive: with always_flush set, or for an unnamed cache, every
        document in the store is removed, including other caches' entries.
        The store may also refuse to flush; that failure is only logged.
        """
        if self._always_flush or is_blank(self._name):
            failure = await self._flush()
            if failure is not None:
                logger.error(
                    f"Document store flush error: {failure.cause}",
                    extra=failure.details,
                    exc_info=failure.cause,
                )
            return

        await self._evict_all_documents()

    async def _flush(self) -> FlushError | None:
        try:
            await self._store.flush()
        except Exception as e:
            return FlushError(self._name, e)
        return None

    async def _evict_all_documents(self) -> None:
        if not self._index_ready:
            await self.ensure_index()

        rows = await self._store.query_view(CACHE_DESIGN_DOCUMENT, CACHE_VIEW, key=self._name, stale=False)
        for row in rows:
            await self._store.remove(row.id)

        logger.info(
            f"Cleared {len(rows)} documents from cache '{self._name}'",
            extra={"cache_name": self._name, "removed": len(rows)},
        )

    async def _probe_design_document(self) -> DesignDocument | None:
        """Read the cache design document. Any failure counts as absent."""
        try:
            return await self._store.get_design_document(CACHE_DESIGN_DOCUMENT)
        except Exception as e:
            logger.warning(
                f"Design document '{CACHE_DESIGN_DOCUMENT}' unavailable, will create it: {e}",
                extra={"cache_name": self._name, "design_document": CACHE_DESIGN_DOCUMENT, "error": str(e)},
            )
            return None

    async def ensure_index(self) -> None:
        """
        Create the names view if it is missing.

        An existing design document keeps its other views; the names view is
        appended to it. Failures to store the design document propagate.
        """
        design_document = await self._probe_design_document()

        if design_document is not None and design_document.has_view(CACHE_VIEW):
            self._index_ready = True
            return

        if design_document is None:
            design_document = DesignDocument(name=CACHE_DESIGN_DOCUMENT, views=[names_view()])
        else:
            design_document.views.append(names_view())

        await self._store.upsert_design_document(design_document)
        self._index_ready = True
        logger.info(
            f"Created view '{CACHE_DESIGN_DOCUMENT}/{CACHE_VIEW}'",
            extra={"cache_name": self._name, "design_document": CACHE_DESIGN_DOCUMENT, "view": CACHE_VIEW},
        )

    async def get_stats(self) -> dict[str, Any]:
        """Store statistics plus this cache's settings."""
        stats = await self._store.get_stats()
        stats.update(
            {
                "cache_name": self._name,
                "ttl": self._ttl,
                "always_flush": self._always_flush,
            }
        )
        return stats

    def __repr__(self) -> str:
        return f"NamespacedCache(name={self._name!r}, ttl={self._ttl}, always_flush={self._always_flush})"
