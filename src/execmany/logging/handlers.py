"""JSON log formatting for execmany.

Each record becomes one JSON line. The workflow and operation a record was
emitted under are lifted to the top level so log collectors can group the
output of a single step run.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus the ones OperationContextFilter adds
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "workflow_id", "operation_id", "context_tag"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields a caller attached with ``extra=``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Output keys:
    - timestamp: ISO-8601 UTC time the record was created
    - level, logger, message
    - workflow, operation: the active operation context, when set
    - extra: fields passed through ``extra=``, when any
    - error: exception type, message and traceback, when logged with one
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        workflow_id = getattr(record, "workflow_id", None)
        if workflow_id:
            entry["workflow"] = workflow_id
            operation_id = getattr(record, "operation_id", None)
            if operation_id:
                entry["operation"] = operation_id

        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)
