"""Introspector module for execmany.

- MediaIntrospector: Protocol defining the introspection interface
- FFprobeIntrospector: Implementation using ffprobe
- MediaIntrospectionError: Exception for introspection failures
- parse_ffprobe_output: Pure ffprobe JSON to Track conversion
"""

from execmany.introspector.ffprobe import FFprobeIntrospector
from execmany.introspector.interface import (
    MediaIntrospectionError,
    MediaIntrospector,
)
from execmany.introspector.parsers import parse_ffprobe_output

__all__ = [
    "MediaIntrospector",
    "MediaIntrospectionError",
    "FFprobeIntrospector",
    "parse_ffprobe_output",
]
