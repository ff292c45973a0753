"""Protocols for the collaborating job services.

The step only depends on these interfaces; local implementations live in
``execmany.jobs.local`` and tests use in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from execmany.jobs.models import ExecutionRequest, Job

# Workspace collection holding files produced by command execution
EXECUTE_COLLECTION = "execute"


@runtime_checkable
class ExecuteService(Protocol):
    """Runs a command against one element asynchronously."""

    def execute(self, request: ExecutionRequest) -> Job:
        """Submit a command execution.

        Args:
            request: The command, its parameters and the source element.

        Returns:
            A Job whose payload, on success, is a serialized element or
            empty when the command produced no new element.
        """
        ...


@runtime_checkable
class InspectionService(Protocol):
    """Inspects a media file asynchronously."""

    def inspect(self, uri: str) -> Job:
        """Submit an inspection of the media at ``uri``.

        Returns:
            A Job whose payload, on success, is a serialized Track with
            populated technical metadata.
        """
        ...
