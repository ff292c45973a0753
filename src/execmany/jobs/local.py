"""Local implementations of the execution and inspection services.

Both run their work on a ThreadPoolExecutor and report through Job
objects, so the step sees the same asynchronous contract it would get from
remote services.
"""

from __future__ import annotations

import logging
import mimetypes
import shlex
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import TracebackType

from execmany.config.models import ExecutionConfig
from execmany.core.subprocess_utils import run_command
from execmany.domain.enums import ElementType
from execmany.domain.models import ELEMENT_CLASSES
from execmany.domain.serialization import element_to_json
from execmany.introspector.interface import MediaIntrospector
from execmany.jobs.models import ExecutionRequest, Job
from execmany.jobs.services import EXECUTE_COLLECTION
from execmany.storage.workspace import FileWorkspace

logger = logging.getLogger(__name__)

# Element type of a produced file when the request does not name one
DEFAULT_RESULT_TYPE = ElementType.ATTACHMENT

# Lines of stderr kept in a failed job's error message
_STDERR_TAIL_LINES = 5


class CommandError(Exception):
    """Raised when a command cannot run or exits unsuccessfully."""


def build_arguments(params: str | None, substitutions: dict[str, str]) -> list[str]:
    """Split parameters with shell quoting rules and fill placeholders.

    Args:
        params: Parameter string, e.g. ``-i #{in} -o #{out}``.
        substitutions: Placeholder name to value, e.g. ``{"in": "/a.mp4"}``.

    Returns:
        Argument list with every ``#{name}`` replaced.

    Raises:
        CommandError: If a placeholder has no value.
    """
    args = []
    for token in shlex.split(params or ""):
        for name, value in substitutions.items():
            token = token.replace(f"#{{{name}}}", value)
        if "#{out}" in token:
            raise CommandError("#{out} used without an output filename")
        args.append(token)
    return args


class _PoolService:
    """Shared thread pool lifecycle for the local services."""

    def __init__(self, max_workers: int, name: str) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=name
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for running jobs."""
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)


class ThreadPoolExecuteService(_PoolService):
    """Runs commands as local subprocesses.

    Placeholders in the parameter string:
    - ``#{in}``: local path of the source element's file
    - ``#{out}``: path the command must write its output to
    - ``#{id}``: source element ID
    - ``#{flavor}``: source element flavor text

    The request's load estimate is not used; concurrency is bounded by
    the pool size instead.
    """

    def __init__(self, workspace: FileWorkspace, config: ExecutionConfig) -> None:
        """Initialize the service.

        Args:
            workspace: Workspace holding input files and the staging collection.
            config: Pool size, allowed commands and timeout.
        """
        super().__init__(config.max_workers, "execmany-exec")
        self._workspace = workspace
        self._config = config

    def execute(self, request: ExecutionRequest) -> Job:
        """Submit a command execution and return its job."""
        job = Job(job_type="execute")
        if not self._config.is_allowed(request.command):
            logger.error("Command '%s' is not allowed", request.command)
            job.fail(f"Command '{request.command}' is not allowed")
            return job
        self._executor.submit(self._run, job, request)
        return job

    def _run(self, job: Job, request: ExecutionRequest) -> None:
        job.mark_running()
        try:
            payload = self._execute(job, request)
        except Exception as e:  # any error must terminate the job
            logger.exception("Job %s failed: %s", job.id, e)
            job.fail(str(e))
        else:
            job.succeed(payload)

    def _execute(self, job: Job, request: ExecutionRequest) -> str | None:
        element = request.element
        if element.uri is None:
            raise CommandError(f"Element {element.id} has no file")
        input_path = self._workspace.get(element.uri)

        substitutions = {
            "in": str(input_path),
            "id": element.id,
            "flavor": str(element.flavor) if element.flavor else "",
        }
        output_path: Path | None = None
        if request.output_filename:
            # Job ID prefix keeps concurrent outputs apart in the collection
            output_path = self._workspace.collection_path(
                EXECUTE_COLLECTION, f"{job.id}-{request.output_filename}"
            )
            output_path.parent.mkdir(parents=True, exist_ok=True)
            substitutions["out"] = str(output_path)

        args = [request.command, *build_arguments(request.params, substitutions)]
        logger.info("Job %s: running %s on element %s", job.id, request.command, element.id)
        _, stderr, returncode = run_command(args, timeout=self._config.command_timeout)
        if returncode != 0:
            tail = "\n".join(stderr.strip().splitlines()[-_STDERR_TAIL_LINES:])
            raise CommandError(
                f"{request.command} exited with status {returncode}: {tail}"
            )

        if output_path is None or not output_path.is_file():
            return None

        result_type = request.expected_type or DEFAULT_RESULT_TYPE
        mimetype, _ = mimetypes.guess_type(request.output_filename or "")
        produced = ELEMENT_CLASSES[result_type](
            id=str(uuid.uuid4()),
            uri=output_path.resolve().as_uri(),
            mimetype=mimetype,
        )
        return element_to_json(produced)


class IntrospectorInspectionService(_PoolService):
    """Inspects media files with a MediaIntrospector on a thread pool."""

    def __init__(
        self,
        workspace: FileWorkspace,
        introspector: MediaIntrospector | None,
        max_workers: int = 2,
    ) -> None:
        """Initialize the service.

        Args:
            workspace: Workspace used to resolve URIs to files.
            introspector: Introspector producing Tracks. When None every
                inspection fails, e.g. because ffprobe is not installed.
            max_workers: Concurrent inspections.
        """
        super().__init__(max_workers, "execmany-inspect")
        self._workspace = workspace
        self._introspector = introspector

    def inspect(self, uri: str) -> Job:
        """Submit an inspection and return its job."""
        job = Job(job_type="inspect")
        if self._introspector is None:
            job.fail(f"No media introspector available to inspect {uri}")
            return job
        self._executor.submit(self._run, job, uri)
        return job

    def _run(self, job: Job, uri: str) -> None:
        assert self._introspector is not None
        job.mark_running()
        try:
            track = self._introspector.get_track(self._workspace.get(uri))
            track.uri = uri
        except Exception as e:  # any error must terminate the job
            logger.exception("Inspection job %s failed for %s: %s", job.id, uri, e)
            job.fail(str(e))
        else:
            job.succeed(element_to_json(track))
