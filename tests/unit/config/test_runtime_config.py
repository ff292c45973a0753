"""Tests for layered runtime configuration."""

from pathlib import Path

import pytest

from execmany.config import (
    ConfigBuilder,
    ConfigSource,
    EnvReader,
    ExecutionConfig,
    LoggingConfig,
    get_config,
    load_config_file,
    source_from_env,
    source_from_file,
)
from execmany.exceptions import ConfigurationError


class TestEnvReader:
    """Tests for EnvReader."""

    def test_reads_values(self) -> None:
        reader = EnvReader(
            env={
                "EXECMANY_MAX_WORKERS": "8",
                "EXECMANY_COMMAND_TIMEOUT": "2.5",
                "EXECMANY_ALLOWED_COMMANDS": "ffmpeg, sox,",
            }
        )

        assert reader.get_int("EXECMANY_MAX_WORKERS") == 8
        assert reader.get_float("EXECMANY_COMMAND_TIMEOUT") == 2.5
        assert reader.get_list("EXECMANY_ALLOWED_COMMANDS") == ["ffmpeg", "sox"]

    def test_invalid_int_returns_default(self) -> None:
        reader = EnvReader(env={"EXECMANY_MAX_WORKERS": "many"})

        assert reader.get_int("EXECMANY_MAX_WORKERS", 4) == 4

    def test_unset_list_is_none(self) -> None:
        assert EnvReader(env={}).get_list("EXECMANY_ALLOWED_COMMANDS") is None


class TestConfigBuilder:
    """Tests for ConfigBuilder precedence."""

    def test_defaults(self) -> None:
        config = ConfigBuilder().build()

        assert config.execution.max_workers == 4
        assert config.execution.allowed_commands == ("*",)
        assert config.logging.level == "info"

    def test_later_sources_win(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(max_workers=2, logging_level="debug"))
        builder.apply(ConfigSource(max_workers=6))

        config = builder.build()

        assert config.execution.max_workers == 6
        assert config.logging.level == "debug"

    def test_file_source_sections(self) -> None:
        source = source_from_file(
            {
                "workspace": {"root": "/srv/ws"},
                "tools": {"ffprobe": "/opt/ffprobe"},
                "execution": {"max_workers": 3, "allowed_commands": ["ffmpeg"]},
                "logging": {"format": "json"},
            }
        )

        assert source.workspace_root == Path("/srv/ws")
        assert source.ffprobe_path == Path("/opt/ffprobe")
        assert source.max_workers == 3
        assert source.allowed_commands == ("ffmpeg",)
        assert source.logging_format == "json"

    def test_env_source(self) -> None:
        source = source_from_env(
            EnvReader(env={"EXECMANY_WORKSPACE": "/tmp/ws", "EXECMANY_LOG_LEVEL": "warning"})
        )

        assert source.workspace_root == Path("/tmp/ws")
        assert source.logging_level == "warning"


class TestGetConfig:
    """Tests for get_config."""

    def test_precedence(self, temp_dir: Path) -> None:
        """CLI beats environment, environment beats the config file."""
        config_file = temp_dir / "config.toml"
        config_file.write_text(
            '[workspace]\nroot = "/from/file"\n\n[execution]\nmax_workers = 2\n'
        )
        reader = EnvReader(env={"EXECMANY_MAX_WORKERS": "5"})

        config = get_config(
            config_path=config_file,
            workspace_root=temp_dir / "cli",
            env_reader=reader,
        )

        assert config.workspace_root == temp_dir / "cli"
        assert config.execution.max_workers == 5

    def test_missing_file_uses_defaults(self, temp_dir: Path) -> None:
        config = get_config(
            config_path=temp_dir / "missing.toml", env_reader=EnvReader(env={})
        )

        assert config.execution.max_workers == 4

    def test_invalid_values_raise(self, temp_dir: Path) -> None:
        reader = EnvReader(env={"EXECMANY_LOG_LEVEL": "verbose"})

        with pytest.raises(ConfigurationError, match="Invalid runtime configuration"):
            get_config(config_path=temp_dir / "missing.toml", env_reader=reader)


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_unparseable_file_is_ignored(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text("not = [valid")

        assert load_config_file(path) == {}

    def test_strict_mode_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text("not = [valid")

        with pytest.raises(ConfigurationError):
            load_config_file(path, strict=True)


class TestRuntimeModels:
    """Tests for runtime config dataclass validation."""

    def test_execution_allow_list(self) -> None:
        config = ExecutionConfig(allowed_commands=("ffmpeg",))

        assert config.is_allowed("ffmpeg")
        assert not config.is_allowed("rm")

    def test_wildcard_allows_everything(self) -> None:
        assert ExecutionConfig().is_allowed("anything")

    def test_invalid_workers(self) -> None:
        with pytest.raises(ValueError):
            ExecutionConfig(max_workers=0)

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValueError):
            LoggingConfig(format="xml")
