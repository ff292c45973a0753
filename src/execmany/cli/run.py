"""CLI run command: execute the step on a media package file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click

from execmany.cli.exit_codes import ExitCode
from execmany.cli.output import CLIResult, error_exit, success_output
from execmany.config import ExecuteManyConfig, get_config, load_step_config
from execmany.domain import MediaPackage, package_from_json, package_to_json
from execmany.domain.serialization import element_to_dict
from execmany.exceptions import ConfigurationError, SerializationError
from execmany.introspector import FFprobeIntrospector, MediaIntrospectionError
from execmany.jobs.local import IntrospectorInspectionService, ThreadPoolExecuteService
from execmany.storage import FileWorkspace
from execmany.workflow import (
    AggregatedResult,
    ExecuteManyOperation,
    OperationContext,
)

logger = logging.getLogger(__name__)


def _load_inputs(
    package_path: Path, config_path: Path
) -> tuple[MediaPackage, ExecuteManyConfig]:
    try:
        text = package_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SerializationError(f"Cannot read package {package_path}: {e}") from e
    return package_from_json(text), load_step_config(config_path)


def _format_human(result: AggregatedResult) -> str:
    lines = [
        f"Package:    {result.package.id}",
        f"Action:     {result.action.value}",
        f"Queue time: {result.queue_time:.3f}s",
        f"Elements:   {len(result.package.elements)}",
    ]
    for element in result.package.elements:
        flavor = str(element.flavor) if element.flavor else "-"
        tags = ",".join(sorted(element.tags)) or "-"
        lines.append(
            f"  {element.element_type.value:<12} {element.id}  {flavor}  [{tags}]"
        )
    if result.properties:
        lines.append("Properties:")
        for key, value in result.properties.items():
            lines.append(f"  {key}={value}")
    return "\n".join(lines)


def _result_data(result: AggregatedResult) -> dict[str, Any]:
    return {
        "action": result.action.value,
        "queue_time": result.queue_time,
        "properties": result.properties,
        "package": {
            "id": result.package.id,
            "elements": [element_to_dict(e) for e in result.package.elements],
        },
    }


@click.command("run")
@click.argument(
    "package_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with the step configuration.",
)
@click.option(
    "--workspace",
    "-w",
    "workspace_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root directory (default: ~/.execmany/workspace).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the resulting package JSON to this file.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Commands run at once (default: from config, 4).",
)
@click.option(
    "--skip",
    is_flag=True,
    help="Skip the step and pass the package through unchanged.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
def run_command(
    package_file: Path,
    config_path: Path,
    workspace_root: Path | None,
    output_path: Path | None,
    workers: int | None,
    skip: bool,
    output_format: str,
) -> None:
    """Run a command over the matching elements of a media package.

    PACKAGE_FILE is a media package JSON document. Element URIs must point
    at files readable from this machine.
    """
    json_output = output_format == "json"

    try:
        package, step_config = _load_inputs(package_file, config_path)
        runtime = get_config(workspace_root=workspace_root, max_workers=workers)
    except (ConfigurationError, SerializationError) as e:
        error_exit(str(e), ExitCode.INVALID_INPUT, json_output)

    workspace = FileWorkspace(runtime.workspace_root)
    try:
        introspector: FFprobeIntrospector | None = FFprobeIntrospector(
            runtime.ffprobe_path
        )
    except MediaIntrospectionError as e:
        logger.warning("Track inspection unavailable: %s", e)
        introspector = None

    with (
        ThreadPoolExecuteService(workspace, runtime.execution) as execute_service,
        IntrospectorInspectionService(
            workspace, introspector, runtime.execution.max_workers
        ) as inspection_service,
    ):
        operation = ExecuteManyOperation(
            OperationContext(
                execute_service=execute_service,
                inspection_service=inspection_service,
                workspace=workspace,
            )
        )
        if skip:
            result = operation.skip(package)
        else:
            outcome = operation.run(package, step_config)
            if outcome.failure is not None:
                error_exit(
                    outcome.failure.message,
                    ExitCode.OPERATION_FAILED,
                    json_output,
                    data={"kind": outcome.failure.kind.value},
                )
            assert outcome.result is not None
            result = outcome.result

    if output_path is not None:
        output_path.write_text(package_to_json(result.package), encoding="utf-8")
        logger.info("Wrote package %s to %s", result.package.id, output_path)

    success_output(
        CLIResult(
            success=True,
            message=_format_human(result),
            data=_result_data(result),
        ),
        json_output,
    )
