"""Operation context for structured logging.

Propagates the workflow and operation identifiers of the running step via
contextvars so every log record emitted while the step runs carries them.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_workflow_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "workflow_id", default=None
)
_operation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation_id", default=None
)


def set_operation_context(workflow_id: str, operation_id: str | None = None) -> None:
    """Set the current operation context.

    Args:
        workflow_id: Identifier of the workflow (usually the package ID).
        operation_id: Identifier of the operation within the workflow.
    """
    _workflow_id.set(workflow_id)
    _operation_id.set(operation_id)


def clear_operation_context() -> None:
    """Clear the current operation context."""
    _workflow_id.set(None)
    _operation_id.set(None)


def get_operation_context() -> tuple[str | None, str | None]:
    """Get current operation context.

    Returns:
        Tuple of (workflow_id, operation_id), either may be None.
    """
    return _workflow_id.get(), _operation_id.get()


@contextmanager
def operation_context(
    workflow_id: str, operation_id: str | None = None
) -> Generator[None, None, None]:
    """Set operation context on entry and restore the previous one on exit.

    Example:
        with operation_context("mp-1", "execute-many"):
            logger.info("Dispatching jobs")  # Automatically includes context
    """
    old_workflow_id = _workflow_id.get()
    old_operation_id = _operation_id.get()
    try:
        set_operation_context(workflow_id, operation_id)
        yield
    finally:
        _workflow_id.set(old_workflow_id)
        _operation_id.set(old_operation_id)


class OperationContextFilter(logging.Filter):
    """Logging filter that injects operation context into log records.

    Adds workflow_id and operation_id attributes, plus a compact
    ``context_tag`` such as ``[mp-1:execute-many] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject operation context into the record. Never filters."""
        workflow_id, operation_id = get_operation_context()

        record.workflow_id = workflow_id
        record.operation_id = operation_id

        if workflow_id:
            if operation_id:
                record.context_tag = f"[{workflow_id}:{operation_id}] "
            else:
                record.context_tag = f"[{workflow_id}] "
        else:
            record.context_tag = ""

        return True
