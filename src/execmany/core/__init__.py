"""Core utilities package.

Pure helpers shared across execmany: JSON parsing with result types and
the subprocess wrapper used for external tools.
"""

from execmany.core.json_utils import (
    JsonParseResult,
    parse_json_with_schema,
    serialize_json_safe,
)
from execmany.core.subprocess_utils import run_command

__all__ = [
    "JsonParseResult",
    "parse_json_with_schema",
    "serialize_json_safe",
    "run_command",
]
