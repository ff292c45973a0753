"""Exceptions for job lifecycle errors."""


class JobStateError(Exception):
    """Raised on an invalid job state transition.

    Attributes:
        job_id: The ID of the job.
        current: The job's current status value.
        requested: The status value that was requested.
    """

    def __init__(self, job_id: str, current: str, requested: str) -> None:
        """Initialize the exception.

        Args:
            job_id: The ID of the job.
            current: The job's current status value.
            requested: The status value that was requested.
        """
        self.job_id = job_id
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move job {job_id} from {current} to {requested}")
