"""
docstore-cache — Redis Document Store

Asynchronous Redis store handle with:
- JSON document bodies stored under the document id
- Per-document TTL via Redis EX seconds
- Design documents stored as JSON under reserved ``_design/<name>`` keys
- View queries evaluated over a SCAN of document keys

Requires: redis>=5.0 with asyncio support

Example:
    store = RedisDocumentStore(redis_url="redis://localhost:6379/0")
    await store.upsert("cache:users:42", {"name": "Ada"}, ttl=60)
    doc = await store.get("cache:users:42")
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Awaitable
from typing import Any, TypeVar

from ...errors import DesignDocumentNotFoundError, StoreUnavailableError, ViewNotFoundError
from ...serialization import from_json, to_json
from ..interface import DocumentStore, ViewRow
from ..views import DesignDocument

logger = logging.getLogger(__name__)

try:
    from redis.asyncio import Redis
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import TimeoutError as RedisTimeoutError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

DESIGN_KEY_PREFIX = "_design/"

T = TypeVar("T")


class RedisDocumentStore(DocumentStore):
    """
    Redis document store handle.

    Notes:
    - Document ids are used as Redis keys verbatim; namespacing is the
      caller's concern.
    - flush() deletes every key except design documents.
    - Connection and timeout failures surface as StoreUnavailableError.
    """

    def __init__(
        self,
        redis_url: str,
        max_connections: int = 10,
        socket_timeout: int = 5,
        scan_batch_size: int = 1000,
    ) -> None:
        """
        Initialize Redis document store.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
            scan_batch_size: COUNT hint for SCAN during flush and view queries
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.scan_batch_size = scan_batch_size
        self._redis_url = redis_url
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._flushes = 0

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    # ------------ Helpers ------------

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove password from URL for logging."""
        return re.sub(r":([^:@/]+)@", r":***@", url)

    @staticmethod
    def _design_key(name: str) -> str:
        return f"{DESIGN_KEY_PREFIX}{name}"

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a client call, translating transport failures."""
        try:
            return await awaitable
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise StoreUnavailableError(
                "redis",
                details={"url": self._sanitize_url(self._redis_url), "error": str(e)},
            ) from e

    async def _scan_document_keys(self) -> AsyncIterator[str]:
        cursor = 0
        while True:
            cursor, keys = await self._call(self._client.scan(cursor=cursor, count=self.scan_batch_size))
            for key in keys:
                if not key.startswith(DESIGN_KEY_PREFIX):
                    yield key
            if cursor == 0:
                break

    # ------------ Documents ------------

    async def get(self, document_id: str) -> Any | None:
        data = await self._call(self._client.get(document_id))
        if data is None:
            self._misses += 1
            return None

        self._hits += 1
        return from_json(data)

    async def upsert(self, document_id: str, value: Any, ttl: int = 0) -> None:
        payload = to_json(value)
        await self._call(self._client.set(name=document_id, value=payload, ex=ttl if ttl > 0 else None))
        self._sets += 1

    async def remove(self, document_id: str) -> bool:
        deleted = await self._call(self._client.delete(document_id))
        if deleted:
            self._deletes += 1
        return bool(deleted)

    async def flush(self) -> None:
        batch: list[str] = []
        total_deleted = 0

        async for key in self._scan_document_keys():
            batch.append(key)
            if len(batch) >= self.scan_batch_size:
                total_deleted += int(await self._call(self._client.delete(*batch)))
                batch = []
        if batch:
            total_deleted += int(await self._call(self._client.delete(*batch)))

        self._deletes += total_deleted
        self._flushes += 1
        logger.info(f"Flushed {total_deleted} documents from Redis store")

    # ------------ Views ------------

    async def query_view(
        self,
        design_document: str,
        view: str,
        key: str | None = None,
        stale: bool = False,
    ) -> list[ViewRow]:
        # Views are evaluated over a live SCAN, so results are never stale
        stored = await self._read_design_document(design_document)
        definition = stored.get_view(view) if stored else None
        if definition is None:
            raise ViewNotFoundError(design_document, view)

        rows = []
        async for doc_id in self._scan_document_keys():
            emitted = definition.emit(doc_id)
            if emitted is None or (key is not None and emitted != key):
                continue
            rows.append(ViewRow(id=doc_id, key=emitted))

        # SCAN may return a key more than once
        unique = {row.id: row for row in rows}
        return sorted(unique.values(), key=lambda row: (row.key, row.id))

    async def _read_design_document(self, name: str) -> DesignDocument | None:
        raw = await self._call(self._client.get(self._design_key(name)))
        if raw is None:
            return None
        return DesignDocument.model_validate_json(raw)

    async def get_design_document(self, name: str) -> DesignDocument:
        design_document = await self._read_design_document(name)
        if design_document is None:
            raise DesignDocumentNotFoundError(name)
        return design_document

    async def upsert_design_document(self, design_document: DesignDocument) -> None:
        await self._call(
            self._client.set(name=self._design_key(design_document.name), value=design_document.model_dump_json())
        )
        logger.debug(
            f"Stored design document '{design_document.name}'",
            extra={"design_document": design_document.name, "views": [v.name for v in design_document.views]},
        )

    # ------------ Lifecycle ------------

    async def get_stats(self) -> dict[str, Any]:
        """Return store statistics and basic Redis info."""
        stats: dict[str, Any] = {
            "backend": "redis",
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "flushes": self._flushes,
            "connected": False,
        }

        total_requests = self._hits + self._misses
        stats["hit_rate"] = round((self._hits / total_requests) * 100, 2) if total_requests else 0.0

        try:
            stats["connected"] = bool(await self._client.ping())
            info = await self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
        except Exception as e:
            # INFO may be restricted; keep minimal stats
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})

        return stats

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis document store at {self._sanitize_url(self._redis_url)}")
        except Exception as e:
            logger.error(f"Error closing Redis client: {e}", extra={"error": str(e)}, exc_info=True)
        finally:
            try:
                await self._client.connection_pool.disconnect()
            except Exception as e:
                logger.warning(f"Error disconnecting Redis connection pool: {e}", extra={"error": str(e)})
