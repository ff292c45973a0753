"""Shared test fixtures for execmany."""

import shutil
import tempfile
from pathlib import Path

import pytest

from execmany.domain import Attachment, Catalog, Flavor, MediaPackage, Track
from execmany.logging.context import clear_operation_context
from execmany.storage import FileWorkspace


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def workspace(temp_dir: Path) -> FileWorkspace:
    """Create a workspace rooted in the temporary directory."""
    return FileWorkspace(temp_dir / "workspace")


@pytest.fixture
def media_dir(temp_dir: Path) -> Path:
    """Create a directory with placeholder source media files."""
    media = temp_dir / "media"
    media.mkdir()
    for name in ("presenter.mp4", "slides.mp4", "cover.png", "episode.xml"):
        (media / name).write_bytes(b"media")
    return media


@pytest.fixture
def sample_package(media_dir: Path) -> MediaPackage:
    """Package with two tracks, an attachment and a catalog.

    - t1: presenter/source track with audio and video, tagged archive
    - t2: presentation/source track with video only, tagged archive
    - a1: presenter/source attachment, tagged archive
    - c1: dublincore/episode catalog, tagged engage
    """
    return MediaPackage(
        id="mp-1",
        elements=[
            Track(
                id="t1",
                flavor=Flavor("presenter", "source"),
                tags={"archive"},
                uri=(media_dir / "presenter.mp4").as_uri(),
                has_audio=True,
                has_video=True,
            ),
            Track(
                id="t2",
                flavor=Flavor("presentation", "source"),
                tags={"archive"},
                uri=(media_dir / "slides.mp4").as_uri(),
                has_video=True,
            ),
            Attachment(
                id="a1",
                flavor=Flavor("presenter", "source"),
                tags={"archive"},
                uri=(media_dir / "cover.png").as_uri(),
            ),
            Catalog(
                id="c1",
                flavor=Flavor("dublincore", "episode"),
                tags={"engage"},
                uri=(media_dir / "episode.xml").as_uri(),
            ),
        ],
    )


@pytest.fixture(autouse=True)
def _reset_operation_context():
    """Make sure no operation context leaks between tests."""
    yield
    clear_operation_context()
