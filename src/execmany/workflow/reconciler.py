"""Reconciliation of job results into the media package.

Each FanoutItem ends up in exactly one of three states:
- passthrough: the job produced nothing and the input element is the result
- property mode: the result is a properties file merged into the workflow
  properties and then deleted
- derived mode: the result is attached to the package as a derivative of
  the input, relocated into the package namespace and re-flavored
Target tags are rewritten on the result in every state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from execmany.config.step import ExecuteManyConfig
from execmany.domain.enums import ElementType
from execmany.domain.models import WILDCARD, Element, Flavor, MediaPackage
from execmany.domain.serialization import element_from_json
from execmany.exceptions import (
    ConfigurationError,
    InspectionError,
    SerializationError,
    StorageError,
)
from execmany.jobs.barrier import wait_for_jobs
from execmany.jobs.models import FanoutItem
from execmany.jobs.services import InspectionService
from execmany.storage.workspace import Workspace
from execmany.workflow.properties import merge_property_file

logger = logging.getLogger(__name__)


def has_wildcard(flavor: Flavor) -> bool:
    return WILDCARD in (flavor.type, flavor.subtype)


def resolve_target_flavor(target: Flavor, input_flavor: Flavor | None) -> Flavor:
    """Resolve wildcard components of a target flavor.

    Examples:
        ``*/mp4`` against ``presenter/source`` gives ``presenter/mp4``;
        ``caption/*`` against ``captions/vtt`` gives ``caption/vtt``.

    Raises:
        ConfigurationError: If the target has a wildcard but the input
            element has no flavor to take it from.
    """
    if not has_wildcard(target):
        return target
    if input_flavor is None:
        raise ConfigurationError(
            f"Target flavor '{target}' needs a source element flavor to resolve"
        )
    return Flavor(
        input_flavor.type if target.type == WILDCARD else target.type,
        input_flavor.subtype if target.subtype == WILDCARD else target.subtype,
    )


def apply_tag_rewrites(element: Element, tags: Sequence[str]) -> None:
    """Apply target tag operations in order.

    A tag with leading dashes removes the tag named by the rest; any other
    tag is added as given.
    """
    for tag in tags:
        if tag.startswith("-"):
            element.remove_tag(tag.lstrip("-"))
        else:
            element.add_tag(tag)


def collect_results(items: Sequence[FanoutItem]) -> list[FanoutItem]:
    """Deserialize every job payload into ``item.result``.

    A blank payload makes the input element the result.

    Returns:
        The items whose result is a track and needs inspection.

    Raises:
        SerializationError: If a payload is not a valid element.
    """
    tracks = []
    for item in items:
        element = element_from_json(item.job.payload)
        if element is None:
            item.result = item.input
            continue
        item.result = element
        if element.element_type is ElementType.TRACK:
            tracks.append(item)
    return tracks


def inspect_tracks(
    items: Sequence[FanoutItem], inspection_service: InspectionService
) -> float:
    """Replace each track result by its inspected version.

    Args:
        items: Items whose result is a track.
        inspection_service: Service running the inspections.

    Returns:
        Queue time of the inspection jobs, 0.0 when there was nothing to
        inspect.

    Raises:
        InspectionError: If any inspection job failed.
        SerializationError: If an inspection payload is not a track.
        StorageError: If a track result has no URI.
    """
    if not items:
        return 0.0

    for item in items:
        assert item.result is not None
        if item.result.uri is None:
            raise StorageError(f"Result track {item.result.id} has no URI")
        job = inspection_service.inspect(item.result.uri)
        logger.debug("Inspecting %s in job %s", item.result.uri, job.id)
        item.inspection_job = job

    jobs = [item.inspection_job for item in items if item.inspection_job]
    logger.info("Waiting for %d track inspection job(s)", len(jobs))
    barrier = wait_for_jobs(jobs)
    if not barrier.success:
        failed = barrier.first_failure
        assert failed is not None
        raise InspectionError(failed.id, failed.error)

    for item in items:
        assert item.inspection_job is not None
        inspected = element_from_json(item.inspection_job.payload)
        if inspected is None or inspected.element_type is not ElementType.TRACK:
            raise SerializationError(
                f"Inspection job {item.inspection_job.id} did not return a track"
            )
        item.result = inspected
    return barrier.queue_time


def reconcile_items(
    items: Sequence[FanoutItem],
    package: MediaPackage,
    config: ExecuteManyConfig,
    workspace: Workspace,
) -> dict[str, str]:
    """Fold every item's result into the package or the workflow properties.

    Items are processed in selection order, so when several property files
    set the same key the one from the later element wins.

    Args:
        items: Items with ``result`` set by collect_results.
        package: Checked-out package, mutated in place.
        config: Step configuration.
        workspace: Workspace holding the produced files.

    Returns:
        Workflow properties collected in property mode (empty otherwise).

    Raises:
        StorageError: If a produced file cannot be read, moved or deleted.
        ConfigurationError: If the target flavor cannot be resolved.
    """
    properties: dict[str, str] = {}
    target_flavor = config.target_flavor

    for item in items:
        result = item.result
        assert result is not None
        if not item.is_passthrough:
            if result.uri is None:
                raise StorageError(f"Result element {result.id} has no URI")
            if config.set_workflow_properties:
                merge_property_file(workspace, result.uri, properties)
            else:
                # storage is only touched once the flavor resolved
                flavor = (
                    resolve_target_flavor(target_flavor, item.input.flavor)
                    if target_flavor is not None
                    else result.flavor
                )
                package.add_derived(result, item.input)
                result.uri = workspace.move_to(
                    result.uri, package.id, result.id, config.output_filename
                )
                result.flavor = flavor
                logger.debug(
                    "Added %s derived from %s", result.id, item.input.id
                )
        apply_tag_rewrites(result, config.target_tags)

    return properties
