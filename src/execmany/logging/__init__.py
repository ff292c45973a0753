"""Structured logging module for execmany.

Provides configurable logging with JSON format support and file rotation.
Includes operation context support so records name the running step.
"""

from execmany.logging.config import configure_logging
from execmany.logging.context import (
    OperationContextFilter,
    clear_operation_context,
    get_operation_context,
    operation_context,
    set_operation_context,
)
from execmany.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "OperationContextFilter",
    "clear_operation_context",
    "configure_logging",
    "get_operation_context",
    "operation_context",
    "set_operation_context",
]
