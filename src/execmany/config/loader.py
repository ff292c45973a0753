"""Configuration loading with precedence handling.

Runtime configuration is loaded with the following precedence (highest to
lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (EXECMANY_*)
3. Config file (~/.execmany/config.toml)
4. Default values

Step configuration is loaded from YAML or from a mapping supplied by the
hosting workflow engine.

Environment variables:
- EXECMANY_CONFIG_PATH: Path to config file (overrides default location)
- EXECMANY_WORKSPACE: Workspace root directory
- EXECMANY_FFPROBE_PATH: Path to ffprobe executable
- EXECMANY_MAX_WORKERS: Concurrent commands in the local execution service
- EXECMANY_ALLOWED_COMMANDS: Comma-separated allowed commands ("*" = any)
- EXECMANY_COMMAND_TIMEOUT: Per-command timeout in seconds
- EXECMANY_LOG_LEVEL, EXECMANY_LOG_FILE, EXECMANY_LOG_FORMAT: Logging
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from execmany.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from execmany.config.env import EnvReader
from execmany.config.models import DEFAULT_DATA_DIR, RuntimeConfig
from execmany.config.step import ExecuteManyConfig
from execmany.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = DEFAULT_DATA_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by the EXECMANY_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("EXECMANY_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load runtime configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses the default location.
        strict: If True, raise ConfigurationError on parse failures.
                If False (default), log and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigurationError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    workspace_root: Path | None = None,
    max_workers: int | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> RuntimeConfig:
    """Get runtime configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides EXECMANY_CONFIG_PATH).
        workspace_root: CLI override for the workspace root.
        max_workers: CLI override for the execution pool size.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise on config file parse failures.

    Returns:
        RuntimeConfig with merged configuration.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(
        ConfigSource(workspace_root=workspace_root, max_workers=max_workers)
    )

    try:
        return builder.build()
    except ValueError as e:
        raise ConfigurationError(f"Invalid runtime configuration: {e}") from e


def parse_step_config(values: Mapping[str, Any]) -> ExecuteManyConfig:
    """Validate a step configuration mapping.

    Args:
        values: Operation configuration keys and values.

    Returns:
        Validated ExecuteManyConfig.

    Raises:
        ConfigurationError: If any value is invalid.
    """
    try:
        return ExecuteManyConfig.model_validate(dict(values))
    except ValidationError as e:
        first_error = e.errors()[0] if e.errors() else {}
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "validation error")
        raise ConfigurationError(
            f"Invalid execute-many configuration: {field}: {msg}"
        ) from e


def load_step_config(path: Path) -> ExecuteManyConfig:
    """Load a step configuration from a YAML file.

    Raises:
        ConfigurationError: If the file is missing, not YAML, not a mapping,
            or holds invalid values.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read step config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in step config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Step config {path} must be a mapping")
    return parse_step_config(data)
