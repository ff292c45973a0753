"""MediaIntrospector interface for track metadata extraction."""

from pathlib import Path
from typing import Protocol

from execmany.domain.models import Track


class MediaIntrospectionError(Exception):
    """Raised when media introspection fails."""

    pass


class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations."""

    def get_track(self, path: Path) -> Track:
        """Build a Track describing the media file at ``path``.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        ...
