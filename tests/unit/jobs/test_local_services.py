"""Tests for the local thread-pool execution and inspection services."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from execmany.config import ExecutionConfig
from execmany.domain import (
    Attachment,
    ElementType,
    Track,
    element_from_json,
)
from execmany.introspector import MediaIntrospectionError, MediaIntrospector
from execmany.jobs import ExecutionRequest
from execmany.jobs.local import (
    CommandError,
    IntrospectorInspectionService,
    ThreadPoolExecuteService,
    build_arguments,
)
from execmany.storage import FileWorkspace


def _request(
    element, params="#{in} #{out}", output="out.txt", expected_type=None, command="tool"
) -> ExecutionRequest:
    return ExecutionRequest(
        command=command,
        params=params,
        element=element,
        output_filename=output,
        expected_type=expected_type,
    )


def _write_output(args, timeout=None):
    """Fake run_command: copy the input argument to the output argument."""
    Path(args[2]).write_bytes(Path(args[1]).read_bytes())
    return "", "", 0


@pytest.fixture
def source(media_dir: Path) -> Attachment:
    return Attachment(id="a1", uri=(media_dir / "cover.png").as_uri())


class TestBuildArguments:
    """Tests for parameter templating."""

    def test_substitutes_placeholders(self) -> None:
        args = build_arguments(
            "-i #{in} --id=#{id} -o '#{out}'",
            {"in": "/media/a b.mp4", "id": "t1", "out": "/ws/out.mp4"},
        )

        assert args == ["-i", "/media/a b.mp4", "--id=t1", "-o", "/ws/out.mp4"]

    def test_no_params(self) -> None:
        assert build_arguments(None, {"in": "/x"}) == []

    def test_output_placeholder_requires_output(self) -> None:
        with pytest.raises(CommandError, match="without an output filename"):
            build_arguments("#{in} #{out}", {"in": "/x"})


class TestThreadPoolExecuteService:
    """Tests for ThreadPoolExecuteService."""

    def test_disallowed_command_fails_without_running(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        config = ExecutionConfig(allowed_commands=("ffmpeg",))

        with (
            patch("execmany.jobs.local.run_command") as mock_run,
            ThreadPoolExecuteService(workspace, config) as service,
        ):
            job = service.execute(_request(source, command="rm"))

        assert job.is_terminal
        assert not job.succeeded
        assert "not allowed" in job.error
        mock_run.assert_not_called()

    def test_produced_file_becomes_attachment(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        with (
            patch("execmany.jobs.local.run_command", side_effect=_write_output),
            ThreadPoolExecuteService(workspace, ExecutionConfig()) as service,
        ):
            job = service.execute(_request(source))
            assert job.wait(timeout=5)

        assert job.succeeded
        produced = element_from_json(job.payload)
        assert produced.element_type is ElementType.ATTACHMENT
        assert produced.mimetype == "text/plain"
        path = workspace.get(produced.uri)
        assert path.name == f"{job.id}-out.txt"
        assert path.parent == workspace.root / "collection" / "execute"

    def test_expected_type_is_used(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        with (
            patch("execmany.jobs.local.run_command", side_effect=_write_output),
            ThreadPoolExecuteService(workspace, ExecutionConfig()) as service,
        ):
            job = service.execute(
                _request(source, output="out.mp4", expected_type=ElementType.TRACK)
            )
            job.wait(timeout=5)

        assert isinstance(element_from_json(job.payload), Track)

    def test_no_output_means_empty_payload(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        with (
            patch("execmany.jobs.local.run_command", return_value=("", "", 0)),
            ThreadPoolExecuteService(workspace, ExecutionConfig()) as service,
        ):
            job = service.execute(_request(source, params="#{in}", output=None))
            job.wait(timeout=5)

        assert job.succeeded
        assert job.payload is None

    def test_non_zero_exit_fails_job(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        with (
            patch(
                "execmany.jobs.local.run_command",
                return_value=("", "line 1\nfatal: bad input\n", 3),
            ),
            ThreadPoolExecuteService(workspace, ExecutionConfig()) as service,
        ):
            job = service.execute(_request(source))
            job.wait(timeout=5)

        assert not job.succeeded
        assert "exited with status 3" in job.error
        assert "fatal: bad input" in job.error

    def test_missing_input_fails_job(self, workspace: FileWorkspace, temp_dir: Path) -> None:
        element = Attachment(id="gone", uri=(temp_dir / "gone.png").as_uri())

        with ThreadPoolExecuteService(workspace, ExecutionConfig()) as service:
            job = service.execute(_request(element))
            job.wait(timeout=5)

        assert not job.succeeded
        assert "not found" in job.error

    @pytest.mark.integration
    @pytest.mark.skipif(shutil.which("cp") is None, reason="cp not available")
    def test_runs_real_command(self, workspace: FileWorkspace, source: Attachment) -> None:
        with ThreadPoolExecuteService(workspace, ExecutionConfig()) as service:
            job = service.execute(_request(source, command="cp"))
            job.wait(timeout=30)

        assert job.succeeded, job.error
        produced = element_from_json(job.payload)
        assert workspace.get(produced.uri).read_bytes() == b"media"


class TestIntrospectorInspectionService:
    """Tests for IntrospectorInspectionService."""

    def test_payload_is_inspected_track(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        introspector = MagicMock(spec=MediaIntrospector)
        introspector.get_track.return_value = Track(
            id="probe", uri="file:///elsewhere", has_audio=True
        )

        with IntrospectorInspectionService(workspace, introspector) as service:
            job = service.inspect(source.uri)
            job.wait(timeout=5)

        track = element_from_json(job.payload)
        assert isinstance(track, Track)
        assert track.has_audio is True
        assert track.uri == source.uri
        introspector.get_track.assert_called_once_with(workspace.get(source.uri))

    def test_introspection_error_fails_job(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        introspector = MagicMock(spec=MediaIntrospector)
        introspector.get_track.side_effect = MediaIntrospectionError("corrupt")

        with IntrospectorInspectionService(workspace, introspector) as service:
            job = service.inspect(source.uri)
            job.wait(timeout=5)

        assert not job.succeeded
        assert job.error == "corrupt"

    def test_without_introspector_every_job_fails(
        self, workspace: FileWorkspace, source: Attachment
    ) -> None:
        with IntrospectorInspectionService(workspace, None) as service:
            job = service.inspect(source.uri)

        assert job.is_terminal
        assert not job.succeeded
