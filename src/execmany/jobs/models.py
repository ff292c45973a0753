"""Job and request models for the fan-out step.

A Job is the handle returned by an execution or inspection service. The
service moves it through its lifecycle from worker threads (or from a
remote status feed); the step only reads it and waits on it.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field

from execmany.domain.enums import ElementType, JobStatus
from execmany.domain.models import Element
from execmany.jobs.exceptions import JobStateError


@dataclass(eq=False)
class Job:
    """Asynchronous unit of work with a terminal success/failure state.

    Timestamps are time.monotonic() values; only differences are meaningful.
    """

    job_type: str = "execute"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: JobStatus = JobStatus.QUEUED
    payload: str | None = None
    error: str | None = None
    created_at: float = field(default_factory=time.monotonic)
    started_at: float | None = None
    finished_at: float | None = None
    _done: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.SUCCEEDED

    @property
    def queue_time(self) -> float:
        """Seconds spent waiting before the job started.

        A job rejected before starting counts its whole life as queue time;
        a job still queued reports 0.0.
        """
        if self.started_at is not None:
            return max(0.0, self.started_at - self.created_at)
        if self.finished_at is not None:
            return max(0.0, self.finished_at - self.created_at)
        return 0.0

    def mark_running(self) -> None:
        """Move the job from queued to running."""
        with self._lock:
            if self.status is not JobStatus.QUEUED:
                raise JobStateError(
                    self.id, self.status.value, JobStatus.RUNNING.value
                )
            self.status = JobStatus.RUNNING
            self.started_at = time.monotonic()

    def succeed(self, payload: str | None = None) -> None:
        """Finish the job successfully with an optional payload."""
        self._finish(JobStatus.SUCCEEDED, payload=payload)

    def fail(self, error: str) -> None:
        """Finish the job unsuccessfully."""
        self._finish(JobStatus.FAILED, error=error)

    def _finish(
        self, status: JobStatus, payload: str | None = None, error: str | None = None
    ) -> None:
        with self._lock:
            if self.status.is_terminal:
                raise JobStateError(self.id, self.status.value, status.value)
            self.status = status
            self.payload = payload
            self.error = error
            self.finished_at = time.monotonic()
        self._done.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the job is terminal.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely.

        Returns:
            True if the job is terminal, False if the timeout expired.
        """
        return self._done.wait(timeout)


@dataclass(frozen=True)
class ExecutionRequest:
    """Everything an execution service needs to run the command once."""

    command: str
    params: str | None
    element: Element
    output_filename: str | None = None
    expected_type: ElementType | None = None
    load: float = 1.0


@dataclass
class FanoutItem:
    """Per-element record of one fan-out run.

    The ordered list of these items replaces parallel positional arrays:
    ``items[i]`` always belongs to the i-th selected element.

    Attributes:
        input: The selected source element.
        job: The command execution job.
        result: The reconciled result element (input itself on passthrough).
        inspection_job: Inspection job, set only when the result is a track.
    """

    input: Element
    job: Job
    result: Element | None = None
    inspection_job: Job | None = None

    @property
    def is_passthrough(self) -> bool:
        """True when the job produced no new element."""
        return self.result is self.input
