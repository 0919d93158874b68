"""
docstore-cache — Cache Interface

Defines the generic cache abstraction callers program against.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ValueWrapper:
    """Holder for a cache value, distinguishing a present value from a miss."""

    value: Any

    def get(self) -> Any:
        return self.value


class CacheInterface(ABC):
    """
    Abstract base class for named caches.

    Keys are converted with str() before use. Values must satisfy the
    persistence constraint of the backing store.
    """

    @property
    @abstractmethod
    def name(self) -> str | None:
        """The cache name."""
        pass

    @property
    @abstractmethod
    def native_cache(self) -> Any:
        """The underlying store handle."""
        pass

    @abstractmethod
    async def get(self, key: Any, type_: type[T] | None = None) -> Any | None:
        """
        Retrieve a value from the cache.

        Args:
            key: Cache key
            type_: Optional type to coerce the stored value to

        Returns:
            Cached value if present, None otherwise
        """
        pass

    @abstractmethod
    async def put(self, key: Any, value: Any) -> None:
        """
        Store a value, replacing any existing one. A None value evicts the key.

        Args:
            key: Cache key
            value: Value to cache
        """
        pass

    @abstractmethod
    async def put_if_absent(self, key: Any, value: Any) -> ValueWrapper | None:
        """
        Store a value only if the key has no value yet.

        Returns:
            None if the value was stored, otherwise a wrapper
        """
        pass

    @abstractmethod
    async def evict(self, key: Any) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove all entries from the cache."""
        pass
