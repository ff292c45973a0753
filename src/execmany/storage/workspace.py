"""Workspace: the file store shared by the step and its services.

Files belonging to a media package live under
``<root>/mediapackage/<package id>/<element id>/``; staging files live in
named collections under ``<root>/collection/<name>/``. Locations are
exchanged as ``file://`` URIs.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

from execmany.exceptions import StorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class Workspace(Protocol):
    """Interface of the file store used by the step."""

    def get(self, uri: str) -> Path:
        """Return a local path for ``uri``."""
        ...

    def move_to(
        self,
        uri: str,
        package_id: str,
        element_id: str,
        filename: str | None = None,
    ) -> str:
        """Move a file into a package's namespace and return its new URI."""
        ...

    def delete_from_collection(self, collection: str, filename: str) -> None:
        """Delete a staging file from a collection."""
        ...

    def put_in_collection(self, collection: str, filename: str, data: bytes) -> str:
        """Store bytes in a collection and return the file's URI."""
        ...


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI (or a plain path) to a Path.

    Raises:
        StorageError: If the URI uses a scheme other than ``file``.
    """
    parsed = urlparse(uri)
    if parsed.scheme in ("", "file"):
        return Path(unquote(parsed.path) if parsed.scheme else uri)
    raise StorageError(f"Unsupported URI scheme '{parsed.scheme}'", uri=uri)


class FileWorkspace:
    """Workspace backed by a local directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the workspace.

        Args:
            root: Root directory; created on first write.
        """
        self.root = Path(root).expanduser()

    def package_dir(self, package_id: str, element_id: str) -> Path:
        return self.root / "mediapackage" / package_id / element_id

    def collection_path(self, collection: str, filename: str) -> Path:
        """Return the path of ``filename`` within ``collection``.

        Raises:
            StorageError: If the filename would escape the collection.
        """
        if not filename or Path(filename).name != filename:
            raise StorageError(f"Invalid collection filename '{filename}'")
        return self.root / "collection" / collection / filename

    def get(self, uri: str) -> Path:
        """Return the local path of an existing file.

        Raises:
            StorageError: If the file does not exist.
        """
        path = uri_to_path(uri)
        if not path.is_file():
            raise StorageError(f"File not found in workspace: {uri}", uri=uri)
        return path

    def move_to(
        self,
        uri: str,
        package_id: str,
        element_id: str,
        filename: str | None = None,
    ) -> str:
        """Move a file into the package namespace.

        Args:
            uri: Current location of the file.
            package_id: Target package.
            element_id: Target element.
            filename: Final file name; defaults to the current name.

        Returns:
            URI of the moved file.

        Raises:
            StorageError: If the source is missing or the move fails.
        """
        source = self.get(uri)
        target_dir = self.package_dir(package_id, element_id)
        target = target_dir / (filename or source.name)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(target))
        except OSError as e:
            raise StorageError(
                f"Could not move {uri} into package {package_id}: {e}", uri=uri
            ) from e
        logger.debug("Moved %s to %s", source, target)
        return target.resolve().as_uri()

    def delete_from_collection(self, collection: str, filename: str) -> None:
        """Delete a file from a collection.

        Raises:
            StorageError: If the file does not exist or cannot be deleted.
        """
        path = self.collection_path(collection, filename)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise StorageError(
                f"File {filename} not found in collection {collection}",
                uri=str(path),
            ) from e
        except OSError as e:
            raise StorageError(
                f"Could not delete {filename} from collection {collection}: {e}",
                uri=str(path),
            ) from e
        logger.debug("Deleted %s from collection %s", filename, collection)

    def put_in_collection(self, collection: str, filename: str, data: bytes) -> str:
        """Write bytes into a collection and return the file's URI."""
        path = self.collection_path(collection, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(
                f"Could not write {filename} to collection {collection}: {e}",
                uri=str(path),
            ) from e
        return path.resolve().as_uri()
