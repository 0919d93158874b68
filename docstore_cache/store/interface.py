"""
docstore-cache — Document Store Interface

Defines the store handle contract the cache layer is written against: a
document key-value store with per-document TTL, a full flush, and view
(secondary index) queries plus design document administration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .views import DesignDocument


@dataclass(frozen=True)
class ViewRow:
    """One row of a view query result."""

    id: str
    key: str


class DocumentStore(ABC):
    """
    Abstract base class for document store handles.

    A single handle may be shared by many caches; implementations must be
    safe for concurrent use.
    """

    @abstractmethod
    async def get(self, document_id: str) -> Any | None:
        """
        Fetch a document.

        Args:
            document_id: Fully qualified document id

        Returns:
            The deserialized document content, or None if no document exists
        """
        pass

    @abstractmethod
    async def upsert(self, document_id: str, value: Any, ttl: int = 0) -> None:
        """
        Create or replace a document.

        Args:
            document_id: Fully qualified document id
            value: Document content (must be JSON-serializable)
            ttl: Expiry in seconds (0 = no expiry)

        Raises:
            InvalidValueError: If the value cannot be serialized
        """
        pass

    @abstractmethod
    async def remove(self, document_id: str) -> bool:
        """
        Remove a document.

        Returns:
            True if a document was removed, False if none existed
        """
        pass

    @abstractmethod
    async def flush(self) -> None:
        """Remove every document in the store. Design documents are kept."""
        pass

    @abstractmethod
    async def query_view(
        self,
        design_document: str,
        view: str,
        key: str | None = None,
        stale: bool = False,
    ) -> list[ViewRow]:
        """
        Query a view.

        Args:
            design_document: Design document name
            view: View name within the design document
            key: Only return rows emitted with exactly this key (None = all rows)
            stale: Allow results that do not reflect the latest writes

        Returns:
            Matching rows ordered by key, then document id

        Raises:
            ViewNotFoundError: If the view is not defined
        """
        pass

    @abstractmethod
    async def get_design_document(self, name: str) -> DesignDocument:
        """
        Read a design document.

        Raises:
            DesignDocumentNotFoundError: If no design document has this name
        """
        pass

    @abstractmethod
    async def upsert_design_document(self, design_document: DesignDocument) -> None:
        """Create or replace a design document."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Return store statistics (hits, misses, sets, deletes, ...)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the handle."""
        pass
