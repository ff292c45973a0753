"""Pure parsing functions for ffprobe JSON output.

These functions turn ffprobe JSON into Track objects. They perform no I/O.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Any

from execmany.domain.models import Track

logger = logging.getLogger(__name__)

# ffprobe codec_type values that count as subtitle streams
_SUBTITLE_TYPES = frozenset({"subtitle"})


def _parse_duration(value: Any, file_path: Path) -> float | None:
    if value is None:
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid duration %r in %s", value, file_path)
        return None
    if duration < 0:
        logger.warning("Invalid negative duration %s in %s", duration, file_path)
        return None
    return duration


def parse_ffprobe_output(path: Path, data: dict[str, Any]) -> Track:
    """Build a Track from ffprobe ``-show_streams -show_format`` output.

    Attached pictures (cover art) are reported by ffprobe as video streams;
    they do not count as video.

    Args:
        path: Path of the probed file.
        data: Parsed ffprobe JSON.

    Returns:
        A Track with a fresh ID, stream presence flags, duration and a
        mimetype guessed from the file name.
    """
    streams = data.get("streams", [])
    codec_types = set()
    for stream in streams:
        codec_type = stream.get("codec_type")
        disposition = stream.get("disposition", {})
        if codec_type == "video" and disposition.get("attached_pic") == 1:
            continue
        if codec_type:
            codec_types.add(codec_type)

    duration = _parse_duration(data.get("format", {}).get("duration"), path)
    mimetype, _ = mimetypes.guess_type(path.name)

    return Track(
        id=str(uuid.uuid4()),
        uri=path.resolve().as_uri(),
        mimetype=mimetype,
        has_audio="audio" in codec_types,
        has_video="video" in codec_types,
        has_subtitle=bool(codec_types & _SUBTITLE_TYPES),
        duration_seconds=duration,
    )
