"""Configuration builder with explicit layering.

ConfigBuilder composes RuntimeConfig from several ConfigSources. Later
sources override earlier ones for every value they set.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from execmany.config.env import EnvReader
from execmany.config.models import (
    DEFAULT_WORKSPACE_ROOT,
    ExecutionConfig,
    LoggingConfig,
    RuntimeConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values mean "not specified in this source" and never override
    values from lower-precedence sources.
    """

    workspace_root: Path | None = None
    ffprobe_path: Path | None = None

    # Execution config
    max_workers: int | None = None
    allowed_commands: tuple[str, ...] | None = None
    command_timeout: float | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds RuntimeConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        """Initialize the builder with no values set."""
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> RuntimeConfig:
        """Build the final RuntimeConfig with defaults for unset values."""
        execution = ExecutionConfig(
            max_workers=self._get("max_workers", 4),
            allowed_commands=self._get("allowed_commands", ("*",)),
            command_timeout=self._get("command_timeout", None),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return RuntimeConfig(
            workspace_root=self._get("workspace_root", DEFAULT_WORKSPACE_ROOT),
            ffprobe_path=self._get("ffprobe_path", None),
            execution=execution,
            logging=logging_config,
        )


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary.

    Returns:
        ConfigSource with values from the config file.
    """
    workspace = file_config.get("workspace", {})
    tools = file_config.get("tools", {})
    execution = file_config.get("execution", {})
    logging_conf = file_config.get("logging", {})

    root_str = workspace.get("root")
    log_file_str = logging_conf.get("file")
    allowed = execution.get("allowed_commands")

    return ConfigSource(
        workspace_root=Path(root_str).expanduser() if root_str else None,
        ffprobe_path=Path(tools["ffprobe"]) if tools.get("ffprobe") else None,
        max_workers=execution.get("max_workers"),
        allowed_commands=tuple(allowed) if allowed is not None else None,
        command_timeout=execution.get("command_timeout"),
        logging_level=logging_conf.get("level"),
        logging_file=Path(log_file_str).expanduser() if log_file_str else None,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from ``EXECMANY_*`` environment variables."""
    allowed = reader.get_list("EXECMANY_ALLOWED_COMMANDS")
    return ConfigSource(
        workspace_root=reader.get_path("EXECMANY_WORKSPACE"),
        ffprobe_path=reader.get_path("EXECMANY_FFPROBE_PATH"),
        max_workers=reader.get_int("EXECMANY_MAX_WORKERS"),
        allowed_commands=tuple(allowed) if allowed is not None else None,
        command_timeout=reader.get_float("EXECMANY_COMMAND_TIMEOUT"),
        logging_level=reader.get_str("EXECMANY_LOG_LEVEL"),
        logging_file=reader.get_path("EXECMANY_LOG_FILE"),
        logging_format=reader.get_str("EXECMANY_LOG_FORMAT"),
    )
