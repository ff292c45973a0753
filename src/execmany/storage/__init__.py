"""Workspace storage for execmany."""

from execmany.storage.workspace import FileWorkspace, Workspace, uri_to_path

__all__ = ["FileWorkspace", "Workspace", "uri_to_path"]
