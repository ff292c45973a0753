"""CLI module for execmany."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import click

from execmany.cli.exit_codes import ExitCode
from execmany.cli.output import error_exit
from execmany.exceptions import ConfigurationError

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from runtime config with CLI overrides.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from execmany.config import get_config
    from execmany.logging import configure_logging

    logging_config = get_config().logging
    overrides: dict[str, object] = {}
    if log_level:
        overrides["level"] = log_level
    if log_file:
        overrides["file"] = log_file
    if log_json:
        overrides["format"] = "json"

    configure_logging(dataclasses.replace(logging_config, **overrides))
    _logging_configured = True


@click.group()
@click.version_option(package_name="execmany")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """execmany - Run a command over every matching element of a media package."""
    ctx.ensure_object(dict)
    try:
        _configure_logging(log_level, log_file, log_json)
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.INVALID_INPUT)


# Defer import to avoid circular dependency
def _register_commands():
    from execmany.cli.inspect import inspect_command
    from execmany.cli.run import run_command

    main.add_command(run_command)
    main.add_command(inspect_command)


_register_commands()
