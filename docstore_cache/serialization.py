"""
docstore-cache — Value Serialization

Documents are persisted as compact UTF-8 JSON. A value is storable when it
comes back equal after a JSON round trip, so tuples and dicts with non-str
keys are rejected along with unserializable objects. Rejected values raise
InvalidValueError before they reach the store.
"""

import json
import logging
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidValueError

logger = logging.getLogger(__name__)


def to_json(value: Any) -> str:
    """Serialize ``value`` to a JSON document body."""
    try:
        payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(value, str(e)) from e

    if json.loads(payload) != value:
        raise InvalidValueError(value, "does not read back equal from JSON")
    return payload


def from_json(data: str | bytes | None) -> Any | None:
    """Deserialize a JSON document body. Returns None if data is None."""
    if data is None:
        return None
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    try:
        return json.loads(data)
    except ValueError as e:
        # Documents written by other clients may not be JSON
        logger.warning(
            f"Failed to decode JSON document, returning raw data: {e}",
            extra={"data_preview": data[:100], "error": str(e)},
        )
        return data


def coerce(value: Any, type_: type[Any]) -> Any:
    """Coerce a deserialized value to ``type_``."""
    try:
        return TypeAdapter(type_).validate_python(value)
    except PydanticValidationError as e:
        raise InvalidValueError(value, f"cannot be coerced to {getattr(type_, '__name__', type_)}") from e
