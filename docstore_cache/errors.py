"""
docstore-cache — Core Error Types

Defines the exception hierarchy for the cache adapter and its store handles.
All exceptions inherit from DocstoreCacheError for consistent error handling.

Store errors (connectivity, missing views) propagate to callers unmodified.
The two best-effort paths (bucket flush and design document probe) log their
failures instead of raising them.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for structured error reporting."""

    # Input validation errors
    INVALID_VALUE = "INVALID_VALUE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"
    FLUSH_FAILED = "FLUSH_FAILED"

    # Store errors
    STORE_ERROR = "STORE_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INDEX_NOT_FOUND = "INDEX_NOT_FOUND"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DocstoreCacheError(Exception):
    """Base exception for all docstore-cache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logs."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DocstoreCacheError):
    """Raised when configuration is invalid or missing."""

    pass


class CacheError(DocstoreCacheError):
    """Base exception for cache-related errors."""

    pass


class InvalidValueError(CacheError):
    """Raised when a value cannot be persisted or coerced to the requested type."""

    def __init__(self, value: Any, reason: str, details: dict[str, Any] | None = None):
        message = f"Value {value!r} of type {type(value).__name__} is not storable: {reason}"
        error_details = {"value_type": type(value).__name__, "reason": reason}
        error_details.update(details or {})
        super().__init__(message, error_details)
        self.value = value


class FlushError(CacheError):
    """Records a failed bucket flush. Logged by clear(), never raised from it."""

    def __init__(self, cache_name: str | None, cause: BaseException):
        message = f"Flush failed for cache '{cache_name or ''}': {cause}"
        super().__init__(message, {"cache_name": cache_name, "error": str(cause)})
        self.cause = cause


class StoreError(DocstoreCacheError):
    """Base exception for store handle errors."""

    pass


class StoreUnavailableError(StoreError):
    """Raised when the store backend cannot be reached."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to reach document store backend: {backend}"
        super().__init__(message, details)


class DesignDocumentNotFoundError(StoreError):
    """Raised when a requested design document does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Design document not found: {name}", {"design_document": name})
        self.name = name


class ViewNotFoundError(StoreError):
    """Raised when a view query targets a view that is not defined."""

    def __init__(self, design_document: str, view: str):
        message = f"View not found: {design_document}/{view}"
        super().__init__(message, {"design_document": design_document, "view": view})


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, InvalidValueError):
        return ErrorCode.INVALID_VALUE

    if isinstance(error, FlushError):
        return ErrorCode.FLUSH_FAILED

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, StoreUnavailableError):
        return ErrorCode.STORE_UNAVAILABLE

    if isinstance(error, DesignDocumentNotFoundError | ViewNotFoundError):
        return ErrorCode.INDEX_NOT_FOUND

    if isinstance(error, StoreError):
        return ErrorCode.STORE_ERROR

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    return ErrorCode.INTERNAL_ERROR
