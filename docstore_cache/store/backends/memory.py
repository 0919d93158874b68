"""
docstore-cache — Memory Document Store

In-process document store with per-document TTL and in-process view
evaluation. Suitable for tests and single-process deployments.
"""

import asyncio
import logging
import time
from typing import Any

from ...errors import DesignDocumentNotFoundError, ViewNotFoundError
from ...serialization import from_json, to_json
from ..interface import DocumentStore, ViewRow
from ..views import DesignDocument

logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStore):
    """
    In-memory document store.

    Features:
    - Documents kept as JSON text, so reads return fresh copies
    - Per-document TTL (0 = no expiry), expired documents dropped on access
    - Design documents kept apart from documents and survive flush()
    """

    def __init__(self, name: str = "memory"):
        """
        Initialize memory document store.

        Args:
            name: Label used in logs and stats
        """
        self.name = name

        # Document storage: id -> (json, expiry_time)
        self._documents: dict[str, tuple[str, float | None]] = {}
        self._design_documents: dict[str, str] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._flushes = 0

        self._lock = asyncio.Lock()

    @staticmethod
    def _is_expired(expiry: float | None) -> bool:
        if expiry is None:
            return False
        return time.time() > expiry

    def _live_ids(self) -> list[str]:
        """Drop expired documents and return the remaining ids. Caller holds the lock."""
        expired = [doc_id for doc_id, (_, expiry) in self._documents.items() if self._is_expired(expiry)]
        for doc_id in expired:
            del self._documents[doc_id]
        return list(self._documents)

    async def get(self, document_id: str) -> Any | None:
        async with self._lock:
            entry = self._documents.get(document_id)
            if entry is None:
                self._misses += 1
                return None

            data, expiry = entry
            if self._is_expired(expiry):
                del self._documents[document_id]
                self._misses += 1
                return None

            self._hits += 1
            return from_json(data)

    async def upsert(self, document_id: str, value: Any, ttl: int = 0) -> None:
        payload = to_json(value)
        expiry = time.time() + ttl if ttl > 0 else None

        async with self._lock:
            self._documents[document_id] = (payload, expiry)
            self._sets += 1

    async def remove(self, document_id: str) -> bool:
        async with self._lock:
            entry = self._documents.pop(document_id, None)
            if entry is None or self._is_expired(entry[1]):
                return False
            self._deletes += 1
            return True

    async def flush(self) -> None:
        async with self._lock:
            size = len(self._documents)
            self._documents.clear()
            self._flushes += 1
        logger.info(f"Flushed {size} documents from memory store '{self.name}'")

    async def query_view(
        self,
        design_document: str,
        view: str,
        key: str | None = None,
        stale: bool = False,
    ) -> list[ViewRow]:
        # Views are evaluated on read, so results are never stale
        async with self._lock:
            raw = self._design_documents.get(design_document)
            definition = DesignDocument.model_validate_json(raw).get_view(view) if raw else None
            if definition is None:
                raise ViewNotFoundError(design_document, view)

            rows = []
            for doc_id in self._live_ids():
                emitted = definition.emit(doc_id)
                if emitted is None or (key is not None and emitted != key):
                    continue
                rows.append(ViewRow(id=doc_id, key=emitted))

        rows.sort(key=lambda row: (row.key, row.id))
        return rows

    async def get_design_document(self, name: str) -> DesignDocument:
        async with self._lock:
            raw = self._design_documents.get(name)
        if raw is None:
            raise DesignDocumentNotFoundError(name)
        return DesignDocument.model_validate_json(raw)

    async def upsert_design_document(self, design_document: DesignDocument) -> None:
        async with self._lock:
            self._design_documents[design_document.name] = design_document.model_dump_json()
        logger.debug(
            f"Stored design document '{design_document.name}'",
            extra={"design_document": design_document.name, "views": [v.name for v in design_document.views]},
        )

    async def get_stats(self) -> dict[str, Any]:
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": "memory",
                "name": self.name,
                "size": len(self._live_ids()),
                "design_documents": len(self._design_documents),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
                "flushes": self._flushes,
            }

    async def close(self) -> None:
        # Nothing to release; data stays in-process
        logger.debug(f"Memory document store '{self.name}' closed")
