"""Merge job poller. Starts a remote job and tracks it until it finishes.

The status is a small state machine::

    Idle -> Starting -> Processing -> VerifyingOutput -> Completed
                  \\           \\                \\
                   +-> Failed  +-> Failed        +-> Failed

``reset()`` returns to Idle from anywhere. Polling runs on one daemon thread
per job; stopping the job sets its cancellation event and bumps a generation
counter so that responses arriving afterwards are dropped.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Union

from clipmaker.upstream import NetworkError, UpstreamClient, UpstreamError

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".mp4"

NETWORK_ERROR_MESSAGE = "Network error, please try again"
START_ERROR_MESSAGE = "Failed to start merge process"
MISSING_OUTPUT_MESSAGE = "Unable to access the merged file. Please try again."


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Starting:
    stage: str = "Initializing..."


@dataclass(frozen=True)
class Processing:
    job_id: str
    progress: float = 0
    stage: str = "Starting merge process..."


@dataclass(frozen=True)
class VerifyingOutput:
    job_id: str


@dataclass(frozen=True)
class Completed:
    result_path: str


@dataclass(frozen=True)
class Failed:
    stage: str
    error_message: str


JobStatus = Union[Idle, Starting, Processing, VerifyingOutput, Completed, Failed]


def is_terminal(status: JobStatus) -> bool:
    return isinstance(status, (Completed, Failed))


def job_id_from_path(path: str) -> str:
    """``"/abc.mp4"`` -> ``"abc"``."""
    if path.startswith("/"):
        path = path[1:]
    if path.endswith(OUTPUT_SUFFIX):
        path = path[: -len(OUTPUT_SUFFIX)]
    return path


def output_filename(job_id: str) -> str:
    return job_id + OUTPUT_SUFFIX


class JobPoller:
    """Runs one merge job at a time against an UpstreamClient."""

    def __init__(
        self,
        client: UpstreamClient,
        interval: float = 2.0,
        on_change: Callable[[JobStatus], None] | None = None,
    ):
        self.client = client
        self.interval = interval
        self.on_change = on_change
        self._lock = threading.Lock()
        # Reentrant: an on_change callback may call reset().
        self._notify_lock = threading.RLock()
        self._status: JobStatus = Idle()
        self._generation = 0
        self._cancel: threading.Event | None = None
        self._thread: threading.Thread | None = None

    @property
    def status(self) -> JobStatus:
        with self._lock:
            return self._status

    def _set(self, status: JobStatus, generation: int | None = None) -> bool:
        """Apply a transition unless it belongs to a stopped job.

        Transitions and their callbacks are serialised, so observers see
        them in the order they were applied.
        """
        with self._notify_lock:
            with self._lock:
                if generation is not None and generation != self._generation:
                    return False
                self._status = status
            logger.debug("job status -> %s", status)
            if self.on_change:
                self.on_change(status)
        return True

    def start(self, videos: list[dict]) -> JobStatus:
        """Start a merge job, replacing any job that is still running."""
        self.stop()
        with self._lock:
            generation = self._generation
        self._set(Starting(), generation)

        try:
            resp = self.client.start_merge(videos)
        except NetworkError:
            logger.exception("Error starting merge")
            self._set(Failed("Request failed", NETWORK_ERROR_MESSAGE), generation)
            return self.status
        except UpstreamError as e:
            logger.warning("Merge start rejected: %s", e.message)
            self._set(Failed("Request failed", START_ERROR_MESSAGE), generation)
            return self.status

        data = resp.data if isinstance(resp.data, dict) else {}
        if not resp.ok or data.get("status") == "error":
            self._set(Failed("Request failed", data.get("error") or START_ERROR_MESSAGE), generation)
            return self.status

        result_path = data.get("url")
        if not result_path:
            self._set(Failed("Request failed", "No job reference returned"), generation)
            return self.status

        job_id = job_id_from_path(result_path)
        processing = Processing(
            job_id=job_id,
            progress=data.get("progress") or 0,
            stage=data.get("stage") or "Starting merge process...",
        )
        if not self._set(processing, generation):
            return self.status

        cancel = threading.Event()
        thread = threading.Thread(
            target=self._run, args=(generation, cancel), name=f"poll-{job_id}", daemon=True
        )
        with self._lock:
            self._cancel = cancel
            self._thread = thread
        thread.start()
        return self.status

    def _run(self, generation: int, cancel: threading.Event) -> None:
        while not cancel.wait(self.interval):
            if not self.poll_once(generation):
                break

    def poll_once(self, generation: int | None = None) -> bool:
        """Issue one status check. Returns True while the job is still processing."""
        with self._lock:
            if generation is None:
                generation = self._generation
            current = self._status
            if generation != self._generation or not isinstance(current, Processing):
                return False

        job_id = current.job_id
        try:
            resp = self.client.merge_status(job_id)
            resp.raise_for_status()
        except NetworkError:
            logger.exception("Error checking merge status for %s", job_id)
            self._set(Failed(current.stage or "failed", NETWORK_ERROR_MESSAGE), generation)
            return False
        except UpstreamError as e:
            logger.warning("Status check for %s failed: %s", job_id, e.message)
            self._set(Failed(current.stage or "failed", e.message), generation)
            return False

        data = resp.data if isinstance(resp.data, dict) else {}
        state = data.get("status")

        if state == "completed":
            self._verify(job_id, generation)
            return False
        if state == "error":
            self._set(
                Failed(data.get("stage") or "failed", data.get("error") or "Unknown error occurred"),
                generation,
            )
            return False

        return self._set(
            Processing(
                job_id=job_id,
                progress=data.get("progress") or current.progress,
                stage=data.get("stage") or current.stage,
            ),
            generation,
        )

    def _verify(self, job_id: str, generation: int) -> None:
        if not self._set(VerifyingOutput(job_id), generation):
            return
        filename = output_filename(job_id)
        try:
            resp = self.client.file_check(filename)
            resp.raise_for_status()
        except UpstreamError:
            logger.exception("Existence check for %s failed", filename)
            self._set(Failed("File processing error", MISSING_OUTPUT_MESSAGE), generation)
            return

        data = resp.data if isinstance(resp.data, dict) else {}
        if data.get("exists"):
            self._set(Completed(data.get("path") or "/" + filename), generation)
        else:
            self._set(Failed("File processing error", MISSING_OUTPUT_MESSAGE), generation)

    def stop(self) -> None:
        """Stop polling. Responses still in flight are discarded."""
        with self._lock:
            self._generation += 1
            cancel, self._cancel = self._cancel, None
            self._thread = None
        if cancel is not None:
            cancel.set()

    def reset(self) -> None:
        self.stop()
        self._set(Idle())

    def wait(self, timeout: float | None = None) -> JobStatus:
        """Block until the polling thread exits (or ``timeout`` passes)."""
        with self._lock:
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return self.status
