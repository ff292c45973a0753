"""The execute-many workflow operation.

Runs one command per selected element of a media package, in parallel on
an execution service, and folds the results back into the package (or
into workflow properties).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from execmany.config.loader import parse_step_config
from execmany.config.step import ExecuteManyConfig
from execmany.domain.enums import Action
from execmany.domain.models import MediaPackage
from execmany.exceptions import (
    ExecuteManyError,
    JobFailedError,
    WorkflowOperationError,
)
from execmany.jobs.barrier import wait_for_jobs
from execmany.jobs.dispatcher import dispatch_jobs
from execmany.jobs.services import ExecuteService, InspectionService
from execmany.logging.context import operation_context
from execmany.storage.workspace import Workspace
from execmany.workflow.reconciler import (
    collect_results,
    inspect_tracks,
    reconcile_items,
)
from execmany.workflow.results import AggregatedResult, StepFailure, StepResult
from execmany.workflow.selector import SelectionCriteria, select_elements

logger = logging.getLogger(__name__)

OPERATION_ID = "execute-many"
DESCRIPTION = "Executes command line workflow operations in workers"


@dataclass(frozen=True)
class OperationContext:
    """Collaborators an operation run depends on."""

    execute_service: ExecuteService
    inspection_service: InspectionService
    workspace: Workspace


class ExecuteManyOperation:
    """Fans a command out over the selected elements of a media package.

    Example:
        operation = ExecuteManyOperation(context)
        outcome = operation.run(package, {"exec": "ffmpeg", "params": "..."})
        if outcome.succeeded:
            package = outcome.result.package
    """

    id = OPERATION_ID
    description = DESCRIPTION

    def __init__(self, context: OperationContext) -> None:
        self._context = context

    def run(
        self,
        package: MediaPackage,
        config: ExecuteManyConfig | Mapping[str, Any],
    ) -> StepResult:
        """Run the operation.

        Works on a checked-out copy of ``package``; the given package is
        never modified.

        Args:
            package: Media package to operate on.
            config: Validated configuration or raw operation keys.

        Returns:
            StepResult holding the aggregated result, or the failure and the
            original package.
        """
        with operation_context(package.id, OPERATION_ID):
            logger.debug("Starting %s on package %s", OPERATION_ID, package.id)
            try:
                if not isinstance(config, ExecuteManyConfig):
                    config = parse_step_config(config)
                result = self._run(package.checkout(), config)
            except ExecuteManyError as e:
                logger.error("%s failed: %s", OPERATION_ID, e)
                return StepResult.failed(StepFailure(e.kind, str(e)), package)
            logger.debug(
                "Completed %s on package %s (queue time %.3fs)",
                OPERATION_ID,
                package.id,
                result.queue_time,
            )
            return StepResult.ok(result)

    def _run(self, package: MediaPackage, config: ExecuteManyConfig) -> AggregatedResult:
        criteria = SelectionCriteria.from_config(config)
        selected = select_elements(package, criteria)
        if not selected:
            logger.warning(
                "No source elements found for the given criteria (%s)",
                criteria.describe(),
            )
            return AggregatedResult(package=package)

        items = dispatch_jobs(self._context.execute_service, selected, config)
        barrier = wait_for_jobs([item.job for item in items])
        logger.info(
            "%d execute job(s) finished (success=%s)", len(items), barrier.success
        )
        if not barrier.success:
            failed = barrier.first_failure
            assert failed is not None
            raise JobFailedError(failed.id, failed.error)

        queue_time = barrier.queue_time
        tracks = collect_results(items)
        queue_time += inspect_tracks(tracks, self._context.inspection_service)
        properties = reconcile_items(items, package, config, self._context.workspace)

        return AggregatedResult(
            package=package,
            properties=properties,
            queue_time=queue_time,
            action=Action.CONTINUE,
        )

    def start(
        self,
        package: MediaPackage,
        config: ExecuteManyConfig | Mapping[str, Any],
    ) -> AggregatedResult:
        """Run the operation as a workflow engine would.

        Raises:
            WorkflowOperationError: If the run failed.
        """
        outcome = self.run(package, config)
        if outcome.failure is not None:
            raise WorkflowOperationError(outcome.failure.message, outcome.failure.kind)
        assert outcome.result is not None
        return outcome.result

    def skip(self, package: MediaPackage) -> AggregatedResult:
        """Skip the operation, leaving the package unchanged."""
        logger.debug("Skipping %s on package %s", OPERATION_ID, package.id)
        return AggregatedResult(package=package, action=Action.SKIP)
