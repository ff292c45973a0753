"""Fan-out of one execution job per selected element."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from execmany.jobs.models import ExecutionRequest, FanoutItem

if TYPE_CHECKING:
    from execmany.config.step import ExecuteManyConfig
    from execmany.domain.models import Element
    from execmany.jobs.services import ExecuteService

logger = logging.getLogger(__name__)


def build_request(element: Element, config: ExecuteManyConfig) -> ExecutionRequest:
    """Build the execution request for one element."""
    return ExecutionRequest(
        command=config.command,
        params=config.params,
        element=element,
        output_filename=config.output_filename,
        expected_type=config.expected_type,
        load=config.load,
    )


def dispatch_jobs(
    service: ExecuteService,
    elements: Sequence[Element],
    config: ExecuteManyConfig,
) -> list[FanoutItem]:
    """Submit one execution job per element, in order.

    Every job is submitted immediately; throttling is left to the
    execution service.

    Args:
        service: Execution service to submit to.
        elements: Selected elements, in selection order.
        config: Step configuration supplying command and parameters.

    Returns:
        FanoutItems aligned with ``elements``.
    """
    items: list[FanoutItem] = []
    for element in elements:
        job = service.execute(build_request(element, config))
        logger.debug(
            "Submitted job %s for element %s (%s)",
            job.id,
            element.id,
            element.flavor,
        )
        items.append(FanoutItem(input=element, job=job))

    logger.info(
        "Dispatched %d '%s' job(s)",
        len(items),
        config.command,
        extra={"job_count": len(items), "command": config.command},
    )
    return items
