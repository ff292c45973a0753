"""Job system for execmany.

- models: Job, ExecutionRequest and per-element FanoutItem records
- services: ExecuteService and InspectionService protocols
- dispatcher: one execution job per selected element
- barrier: block until a set of jobs is terminal
- local: thread-pool implementations of both services
"""

from execmany.jobs.barrier import BarrierResult, wait_for_jobs
from execmany.jobs.dispatcher import build_request, dispatch_jobs
from execmany.jobs.exceptions import JobStateError
from execmany.jobs.models import ExecutionRequest, FanoutItem, Job
from execmany.jobs.services import (
    EXECUTE_COLLECTION,
    ExecuteService,
    InspectionService,
)

__all__ = [
    # Models
    "ExecutionRequest",
    "FanoutItem",
    "Job",
    # Services
    "EXECUTE_COLLECTION",
    "ExecuteService",
    "InspectionService",
    # Fan-out / fan-in
    "build_request",
    "dispatch_jobs",
    "BarrierResult",
    "wait_for_jobs",
    # Exceptions
    "JobStateError",
]
