"""Exceptions raised by the execute-many operation.

Every failure the operation can hit maps onto one ErrorKind. The operation
converts any ExecuteManyError into a tagged StepFailure at its boundary,
so callers that only care about success/failure never need to catch these.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Classification of a failed execute-many run."""

    CONFIGURATION = "configuration"  # Invalid step configuration
    EXECUTION = "execution"  # A primary command job failed
    SERIALIZATION = "serialization"  # A job payload is not an element
    STORAGE = "storage"  # Workspace read/move/delete failed
    INSPECTION = "inspection"  # A track inspection job failed


class ExecuteManyError(Exception):
    """Base class for execute-many errors."""

    kind: ErrorKind = ErrorKind.EXECUTION


class ConfigurationError(ExecuteManyError):
    """Raised when the step configuration is invalid.

    An unknown expected type is caught before any job is dispatched; a
    wildcard target flavor that cannot be resolved surfaces while
    reconciling derived elements.
    """

    kind = ErrorKind.CONFIGURATION


class JobFailedError(ExecuteManyError):
    """Raised when a command execution job terminates unsuccessfully.

    Attributes:
        job_id: ID of the first failed job.
        reason: Error reported by the job, if any.
    """

    kind = ErrorKind.EXECUTION
    _prefix = "Execute operation failed"

    def __init__(self, job_id: str, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            job_id: ID of the failed job.
            reason: Error message reported by the job.
        """
        self.job_id = job_id
        self.reason = reason
        message = f"{self._prefix} (job {job_id})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InspectionError(JobFailedError):
    """Raised when inspection of a produced track fails."""

    kind = ErrorKind.INSPECTION
    _prefix = "Execute operation failed in track inspection"


class SerializationError(ExecuteManyError):
    """Raised when a job payload cannot be parsed into an element."""

    kind = ErrorKind.SERIALIZATION


class StorageError(ExecuteManyError):
    """Raised when a workspace operation fails.

    Attributes:
        uri: The URI or path involved, if known.
    """

    kind = ErrorKind.STORAGE

    def __init__(self, message: str, uri: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            uri: The URI or path involved.
        """
        self.uri = uri
        super().__init__(message)


class WorkflowOperationError(Exception):
    """Single step-level failure surfaced to the hosting workflow engine.

    Attributes:
        kind: The classification of the underlying failure.
    """

    def __init__(self, message: str, kind: ErrorKind) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            kind: Classification of the underlying failure.
        """
        self.kind = kind
        super().__init__(message)
