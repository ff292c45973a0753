"""Loading and merging of workflow property files.

A command run in property mode writes a ``key=value`` file instead of a
new element. Its entries become workflow properties and the file itself is
removed from the staging collection.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from pathlib import Path

from execmany.exceptions import StorageError
from execmany.jobs.services import EXECUTE_COLLECTION
from execmany.storage.workspace import Workspace

logger = logging.getLogger(__name__)

_COMMENT_PREFIXES = ("#", "!")


def _split_line(line: str) -> tuple[str, str]:
    # First '=' or ':' wins
    positions = [p for p in (line.find("="), line.find(":")) if p >= 0]
    if not positions:
        return line.strip(), ""
    sep = min(positions)
    return line[:sep].strip(), line[sep + 1 :].lstrip()


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an ordered dict.

    Blank lines and lines starting with ``#`` or ``!`` are skipped. Keys
    are stripped; values lose leading whitespace only. A line without a
    separator is a key with an empty value. Later duplicates win.
    """
    properties: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        key, value = _split_line(raw.lstrip())
        if key:
            properties[key] = value
    return properties


def load_properties(path: Path) -> dict[str, str]:
    """Read and parse a UTF-8 properties file.

    Raises:
        StorageError: If the file is missing or unreadable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(
            f"Could not read properties file {path}: {e}", uri=str(path)
        ) from e
    return parse_properties(text)


def merge_property_file(
    workspace: Workspace, uri: str, properties: MutableMapping[str, str]
) -> None:
    """Merge a staged properties file into ``properties`` and delete it.

    Args:
        workspace: Workspace holding the staged file.
        uri: URI of the properties file.
        properties: Aggregated workflow properties, updated in place.

    Raises:
        StorageError: If the file cannot be read or deleted.
    """
    path = workspace.get(uri)
    loaded = load_properties(path)
    logger.debug("Loaded %d propert(ies) from %s", len(loaded), path.name)
    properties.update(loaded)
    workspace.delete_from_collection(EXECUTE_COLLECTION, path.name)
