"""CLI output formatting for JSON and human-readable output."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn

import click

from execmany.cli.exit_codes import ExitCode


@dataclass
class CLIResult:
    """Result object for CLI operations.

    Provides consistent JSON serialization for command results.
    """

    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    exit_code: ExitCode = ExitCode.SUCCESS

    def to_json(self) -> str:
        """Serialize to JSON string.

        Returns:
            JSON string with status, message, and optional data fields.
        """
        output: dict[str, Any] = {
            "status": "completed" if self.success else "failed",
        }
        if self.success:
            output["message"] = self.message
            output.update(self.data)
        else:
            output["error"] = {
                "code": self.exit_code.name,
                "message": self.message,
            }
            output.update(self.data)
        return json.dumps(output, indent=2)


def error_exit(
    message: str,
    code: ExitCode,
    json_output: bool = False,
    data: dict[str, Any] | None = None,
) -> NoReturn:
    """Print an error in the requested format and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.
        json_output: Whether to format output as JSON.
        data: Extra fields for JSON output.
    """
    if json_output:
        result = CLIResult(
            success=False, message=message, data=data or {}, exit_code=code
        )
        click.echo(result.to_json(), err=True)
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(int(code))


def success_output(result: CLIResult, json_output: bool = False) -> None:
    """Output successful result in appropriate format."""
    if json_output:
        click.echo(result.to_json())
    else:
        click.echo(result.message)
