"""FFprobe-based implementation of the MediaIntrospector protocol."""

from __future__ import annotations

import json
import shutil
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from execmany.core.subprocess_utils import run_command
from execmany.domain.models import Track
from execmany.introspector.interface import MediaIntrospectionError
from execmany.introspector.parsers import parse_ffprobe_output


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector.

    Determines which kinds of streams a media file carries.
    """

    def __init__(self, ffprobe_path: Path | None = None, timeout: int = 60) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. Defaults to the
                ffprobe found on PATH.
            timeout: Seconds before a probe is abandoned.

        Raises:
            MediaIntrospectionError: If ffprobe is not available.
        """
        if ffprobe_path is None:
            found = shutil.which("ffprobe")
            ffprobe_path = Path(found) if found else None
        if ffprobe_path is None:
            raise MediaIntrospectionError(
                "ffprobe is not installed or not in PATH. "
                "Install ffmpeg or set EXECMANY_FFPROBE_PATH."
            )
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    @staticmethod
    def is_available() -> bool:
        """Check if ffprobe is on PATH."""
        return shutil.which("ffprobe") is not None

    def get_track(self, path: Path) -> Track:
        """Inspect a media file.

        Args:
            path: Path to the media file.

        Returns:
            Track describing the file.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            data = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e

        return parse_ffprobe_output(path, data)

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            MediaIntrospectionError: If ffprobe fails or the output lacks
                the required keys.
        """
        stdout, stderr, returncode = run_command(
            [
                self._ffprobe_path,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                path,
            ],
            timeout=self._timeout,
        )
        if returncode != 0:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {stderr.strip() or returncode}"
            )

        data = json.loads(stdout)
        if "streams" not in data:
            raise MediaIntrospectionError(
                f"Missing 'streams' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )
        return data
