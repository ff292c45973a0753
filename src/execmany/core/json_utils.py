"""Safe JSON utilities with consistent error handling.

Parsing functions return Result types rather than raising exceptions,
so callers decide how a malformed document maps onto their own errors.

Example usage:
    result = parse_json_with_schema(job.payload, ElementSchema, context="payload")
    if result.success and result.value is not None:
        element = result.value
    else:
        raise SerializationError(result.error)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from pydantic import BaseModel

T = TypeVar("T")
M = TypeVar("M", bound="BaseModel")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonParseResult(Generic[T]):
    """Result of a JSON parsing operation.

    Attributes:
        success: True if parsing succeeded, False otherwise.
        value: The parsed value if successful, None otherwise.
        error: Error message if parsing failed, None otherwise.
    """

    success: bool
    value: T | None
    error: str | None = None


def parse_json_with_schema(
    raw: str | None,
    schema: type[M],
    *,
    context: str = "",
) -> JsonParseResult[M]:
    """Parse JSON and validate against a Pydantic schema.

    Args:
        raw: JSON string to parse.
        schema: Pydantic model class for validation.
        context: Context string for error messages.

    Returns:
        JsonParseResult with validated model instance or error information.
        If raw is None or blank, returns success with None value.
    """
    from pydantic import ValidationError

    if raw is None or not raw.strip():
        return JsonParseResult(success=True, value=None, error=None)

    context_prefix = f"{context}: " if context else ""

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        error_msg = f"{context_prefix}Invalid JSON at position {e.pos}: {e.msg}"
        logger.warning(error_msg)
        return JsonParseResult(success=False, value=None, error=error_msg)

    try:
        validated = schema.model_validate(data)
        return JsonParseResult(success=True, value=validated, error=None)
    except ValidationError as e:
        error_count = len(e.errors())
        first_error = e.errors()[0] if e.errors() else {}
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "validation error")
        error_msg = (
            f"{context_prefix}Schema validation failed "
            f"({error_count} error(s)): {field}: {msg}"
        )
        logger.warning(error_msg)
        return JsonParseResult(success=False, value=None, error=error_msg)


def serialize_json_safe(
    data: dict | list | None,
    *,
    context: str = "",
    indent: int | None = None,
) -> str | None:
    """Serialize data to JSON string with error handling.

    Args:
        data: Data to serialize. None returns None.
        context: Context string for error messages.
        indent: Optional indentation for pretty output.

    Returns:
        JSON string or None if data is None.

    Raises:
        TypeError: If data is not JSON-serializable.
    """
    if data is None:
        return None

    try:
        return json.dumps(data, indent=indent)
    except TypeError as e:
        context_prefix = f"{context}: " if context else ""
        error_msg = f"{context_prefix}Cannot serialize to JSON: {e}"
        logger.error(error_msg)
        raise TypeError(error_msg) from e
