"""Runtime configuration models for execmany.

These dataclasses describe the process-level settings used by the local
collaborators and the CLI. Per-step settings live in
``execmany.config.step``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DATA_DIR = Path.home() / ".execmany"
DEFAULT_WORKSPACE_ROOT = DEFAULT_DATA_DIR / "workspace"


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class ExecutionConfig:
    """Settings for the local thread-pool execution service."""

    # Maximum number of commands running at once
    max_workers: int = 4

    # Commands allowed to run; "*" allows any command
    allowed_commands: tuple[str, ...] = ("*",)

    # Per-command timeout in seconds (None = no timeout)
    command_timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise ValueError("command_timeout must be positive")

    def is_allowed(self, command: str) -> bool:
        """Return True if ``command`` may be executed."""
        return "*" in self.allowed_commands or command in self.allowed_commands


@dataclass
class RuntimeConfig:
    """Main configuration for execmany."""

    workspace_root: Path = DEFAULT_WORKSPACE_ROOT
    ffprobe_path: Path | None = None
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
