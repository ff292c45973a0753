"""Barrier that blocks until a set of jobs is terminal."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from execmany.jobs.models import Job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarrierResult:
    """Aggregate outcome of waiting on a set of jobs.

    Attributes:
        success: True only if every job succeeded.
        queue_time: Sum of queue time over all jobs, failed ones included.
        failed: Failed jobs, in the order they were given.
    """

    success: bool
    queue_time: float
    failed: tuple[Job, ...] = field(default_factory=tuple)

    @property
    def first_failure(self) -> Job | None:
        return self.failed[0] if self.failed else None


def wait_for_jobs(jobs: Sequence[Job]) -> BarrierResult:
    """Block until every job has reached a terminal state.

    There is no timeout at this layer; deadlines belong to the services
    running the jobs.

    Args:
        jobs: Jobs to wait for. Must not be empty.

    Returns:
        BarrierResult summarizing the outcome.

    Raises:
        ValueError: If ``jobs`` is empty.
    """
    if not jobs:
        raise ValueError("wait_for_jobs requires at least one job")

    logger.debug("Waiting for %d job(s)", len(jobs))
    for job in jobs:
        job.wait()

    failed = tuple(job for job in jobs if not job.succeeded)
    queue_time = sum(job.queue_time for job in jobs)

    if failed:
        logger.warning(
            "%d of %d job(s) failed; first failure: %s (%s)",
            len(failed),
            len(jobs),
            failed[0].id,
            failed[0].error or "no error reported",
        )
    else:
        logger.debug("All %d job(s) succeeded", len(jobs))

    return BarrierResult(success=not failed, queue_time=queue_time, failed=failed)
