"""Tests for job dispatch."""

from unittest.mock import MagicMock

from fakes import FakeExecuteService

from execmany.config import parse_step_config
from execmany.domain import MediaPackage
from execmany.jobs import ExecuteService, Job, build_request, dispatch_jobs


class TestBuildRequest:
    """Tests for build_request."""

    def test_copies_step_settings(self, sample_package: MediaPackage) -> None:
        config = parse_step_config(
            {
                "exec": "ffmpeg",
                "params": "-i #{in}",
                "output-filename": "out.mp4",
                "expected-type": "track",
                "load": "3",
            }
        )
        element = sample_package.get_element("t1")

        request = build_request(element, config)

        assert request.command == "ffmpeg"
        assert request.params == "-i #{in}"
        assert request.element is element
        assert request.output_filename == "out.mp4"
        assert request.expected_type.value == "track"
        assert request.load == 3.0


class TestDispatchJobs:
    """Tests for dispatch_jobs."""

    def test_one_job_per_element_in_order(self, sample_package: MediaPackage) -> None:
        service = FakeExecuteService()
        config = parse_step_config({"exec": "echo"})
        elements = sample_package.elements[:3]

        items = dispatch_jobs(service, elements, config)

        assert [item.input for item in items] == elements
        assert [item.job for item in items] == service.jobs
        assert [r.element.id for r in service.requests] == ["t1", "t2", "a1"]

    def test_items_start_without_result(self, sample_package: MediaPackage) -> None:
        service = MagicMock(spec=ExecuteService)
        service.execute.return_value = Job()

        items = dispatch_jobs(
            service, sample_package.elements[:1], parse_step_config({"exec": "echo"})
        )

        assert items[0].result is None
        assert items[0].inspection_job is None
        service.execute.assert_called_once()
