"""Environment variable reader with dependency injection support.

Reads and converts ``EXECMANY_*`` variables. Accepts an optional env
mapping so tests never have to touch os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvReader:
    """Environment variable reader with type conversion and validation.

    Example:
        reader = EnvReader(env={"EXECMANY_MAX_WORKERS": "8"})
        workers = reader.get_int("EXECMANY_MAX_WORKERS", 4)  # Returns 8
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from environment variable."""
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer from environment variable.

        Logs a warning and returns ``default`` if the value cannot be parsed.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float from environment variable.

        Logs a warning and returns ``default`` if the value cannot be parsed.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path from environment variable, with tilde expansion."""
        value = self._env.get(var)
        if value is None:
            return default
        return Path(value).expanduser()

    def get_list(self, var: str, separator: str = ",") -> list[str] | None:
        """Get a separator-delimited list, or None if the variable is unset."""
        value = self._env.get(var)
        if value is None:
            return None
        return [part.strip() for part in value.split(separator) if part.strip()]
