"""Configuration management for execmany.

Two kinds of configuration:
- RuntimeConfig: process settings layered from defaults, config file
  (~/.execmany/config.toml), EXECMANY_* environment variables and CLI flags
- ExecuteManyConfig: settings of one workflow step, validated with Pydantic
"""

from execmany.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from execmany.config.env import EnvReader
from execmany.config.loader import (
    get_config,
    get_default_config_path,
    load_config_file,
    load_step_config,
    parse_step_config,
)
from execmany.config.models import ExecutionConfig, LoggingConfig, RuntimeConfig
from execmany.config.step import ExecuteManyConfig

__all__ = [
    # Models
    "ExecuteManyConfig",
    "ExecutionConfig",
    "LoggingConfig",
    "RuntimeConfig",
    # Loader
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "load_step_config",
    "parse_step_config",
    # Builder
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
]
