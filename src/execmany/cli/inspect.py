"""CLI inspect command: show how a media file would be seen as a track."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from execmany.cli.exit_codes import ExitCode
from execmany.cli.output import error_exit
from execmany.config import get_config
from execmany.domain import element_to_json
from execmany.exceptions import ConfigurationError
from execmany.introspector import FFprobeIntrospector, MediaIntrospectionError

logger = logging.getLogger(__name__)


@click.command("inspect")
@click.argument("file", type=click.Path(exists=False, path_type=Path))
def inspect_command(file: Path) -> None:
    """Inspect a media file and print the resulting track as JSON.

    FILE is the path to the media file to inspect.
    """
    if not file.exists():
        error_exit(f"File not found: {file}", ExitCode.INVALID_INPUT)

    try:
        ffprobe_path = get_config().ffprobe_path
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.INVALID_INPUT)

    try:
        introspector = FFprobeIntrospector(ffprobe_path)
    except MediaIntrospectionError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE)

    try:
        track = introspector.get_track(file)
    except MediaIntrospectionError as e:
        error_exit(f"Could not inspect {file}: {e}", ExitCode.OPERATION_FAILED)

    click.echo(element_to_json(track))
