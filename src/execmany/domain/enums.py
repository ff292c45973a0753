"""Domain enums for execmany."""

from __future__ import annotations

from enum import Enum


class ElementType(Enum):
    """Kind of a media package element.

    Closed set: every element in a package is exactly one of these.
    """

    TRACK = "track"
    ATTACHMENT = "attachment"
    CATALOG = "catalog"
    PUBLICATION = "publication"

    @classmethod
    def parse(cls, value: str) -> ElementType:
        """Parse an element type name, ignoring case and surrounding space.

        Args:
            value: Type name such as "Track" or "attachment".

        Returns:
            The matching ElementType.

        Raises:
            ValueError: If the name is not a known element type.
        """
        normalized = value.strip().casefold()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"'{value}' is not a valid element type")


class Action(Enum):
    """What the hosting engine should do after this step."""

    CONTINUE = "continue"
    SKIP = "skip"


class JobStatus(Enum):
    """Lifecycle state of an asynchronous job.

    State transitions:
        queued → running → succeeded
        queued → running → failed
        queued → failed   (rejected before starting)
    """

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Return True for succeeded and failed."""
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)
