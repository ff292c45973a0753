"""Exit codes for execmany CLI commands."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes shared by all commands."""

    SUCCESS = 0

    # The step (or inspection) ran and failed
    OPERATION_FAILED = 1

    # Package, step config or runtime config could not be read
    INVALID_INPUT = 2

    # A required external tool (ffprobe) is missing
    TOOL_NOT_AVAILABLE = 3
