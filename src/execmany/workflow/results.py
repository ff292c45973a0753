"""Outcome types returned by the execute-many operation."""

from __future__ import annotations

from dataclasses import dataclass, field

from execmany.domain.enums import Action
from execmany.domain.models import MediaPackage
from execmany.exceptions import ErrorKind


@dataclass
class AggregatedResult:
    """Outcome handed back to the hosting workflow engine.

    Attributes:
        package: The resulting media package.
        properties: Workflow properties set by the step.
        queue_time: Total seconds the step's jobs spent queued.
        action: Whether the workflow continues or the step was skipped.
    """

    package: MediaPackage
    properties: dict[str, str] = field(default_factory=dict)
    queue_time: float = 0.0
    action: Action = Action.CONTINUE


@dataclass(frozen=True)
class StepFailure:
    """Why a run failed."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class StepResult:
    """Tagged result of one run: either ``result`` or ``failure`` is set.

    Build instances with :meth:`ok` or :meth:`failed`.
    """

    result: AggregatedResult | None = None
    failure: StepFailure | None = None
    # Package as given to the run, returned untouched on failure
    original: MediaPackage | None = None

    @classmethod
    def ok(cls, result: AggregatedResult) -> StepResult:
        return cls(result=result)

    @classmethod
    def failed(cls, failure: StepFailure, original: MediaPackage) -> StepResult:
        return cls(failure=failure, original=original)

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def package(self) -> MediaPackage:
        """Resulting package on success, the original package on failure."""
        if self.result is not None:
            return self.result.package
        assert self.original is not None
        return self.original
