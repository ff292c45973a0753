"""Tests for FileWorkspace."""

from pathlib import Path

import pytest

from execmany.exceptions import ErrorKind, StorageError
from execmany.storage import FileWorkspace, uri_to_path


class TestUriToPath:
    """Tests for uri_to_path."""

    def test_file_uri(self) -> None:
        assert uri_to_path("file:///tmp/a%20b.mp4") == Path("/tmp/a b.mp4")

    def test_plain_path(self) -> None:
        assert uri_to_path("/tmp/a.mp4") == Path("/tmp/a.mp4")

    def test_other_scheme_is_rejected(self) -> None:
        with pytest.raises(StorageError, match="Unsupported URI scheme"):
            uri_to_path("https://example.org/a.mp4")


class TestFileWorkspace:
    """Tests for FileWorkspace file operations."""

    def test_get_missing_file(self, workspace: FileWorkspace, temp_dir: Path) -> None:
        with pytest.raises(StorageError) as exc_info:
            workspace.get((temp_dir / "missing.mp4").as_uri())

        assert exc_info.value.kind is ErrorKind.STORAGE

    def test_put_and_get(self, workspace: FileWorkspace) -> None:
        uri = workspace.put_in_collection("execute", "a.txt", b"data")

        assert workspace.get(uri).read_bytes() == b"data"

    def test_collection_rejects_traversal(self, workspace: FileWorkspace) -> None:
        with pytest.raises(StorageError, match="Invalid collection filename"):
            workspace.collection_path("execute", "../escape.txt")

    def test_move_to_renames_into_package(self, workspace: FileWorkspace) -> None:
        uri = workspace.put_in_collection("execute", "job-1-out.mp4", b"data")

        moved = workspace.move_to(uri, "mp-1", "el-1", "out.mp4")

        target = workspace.root / "mediapackage" / "mp-1" / "el-1" / "out.mp4"
        assert workspace.get(moved) == target.resolve()
        assert target.read_bytes() == b"data"
        assert not workspace.collection_path("execute", "job-1-out.mp4").exists()

    def test_move_to_keeps_name_by_default(self, workspace: FileWorkspace) -> None:
        uri = workspace.put_in_collection("execute", "result.xml", b"<x/>")

        moved = workspace.move_to(uri, "mp-1", "el-1")

        assert uri_to_path(moved).name == "result.xml"

    def test_delete_from_collection(self, workspace: FileWorkspace) -> None:
        workspace.put_in_collection("execute", "props.txt", b"a=1")

        workspace.delete_from_collection("execute", "props.txt")

        assert not workspace.collection_path("execute", "props.txt").exists()

    def test_delete_missing_file(self, workspace: FileWorkspace) -> None:
        with pytest.raises(StorageError, match="not found in collection"):
            workspace.delete_from_collection("execute", "missing.txt")
