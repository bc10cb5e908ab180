"""A pool of worker threads that run background jobs and report results."""

from __future__ import annotations

import logging
import queue
import random
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, List, Mapping, MutableSequence, Optional

log = logging.getLogger(__name__)

NUM_THREADS = 8


class JobKind(Enum):
    LOAD_IMAGE = auto()
    DOWNLOAD_URL = auto()
    SEARCH_PLATFORM = auto()
    SEARCH_GAME = auto()
    CHECK_UPDATES = auto()


@dataclass(frozen=True)
class Job:
    """A unit of background work and its parameters."""

    kind: JobKind
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class JobResult:
    """The outcome of a finished job."""

    kind: JobKind
    value: Any = None


JobHandler = Callable[[Job], Optional[JobResult]]


class JobSystem:
    """Runs submitted jobs on worker threads.

    ``handler`` does the work of a job. Its result, unless ``None``, is
    queued for ``poll_results``; an exception it raises is logged and the
    job produces no result.
    """

    def __init__(self, handler: JobHandler, num_threads: int = NUM_THREADS) -> None:
        if num_threads < 1:
            raise ValueError("num_threads must be at least 1")
        self._handler = handler
        self._jobs: "queue.Queue[Optional[Job]]" = queue.Queue()
        self._results: "queue.Queue[JobResult]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._workers = [
            threading.Thread(target=self._poll_pending_jobs, name=f"job-worker-{i}", daemon=True)
            for i in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    def _poll_pending_jobs(self) -> None:
        for job in iter(self._jobs.get, None):
            log.info("Processing job %r", job)
            try:
                result = self._handler(job)
            except Exception:
                log.exception("Error occurred while processing job %r", job)
                continue
            if result is not None:
                self._results.put(result)

    def submit(self, job: Job) -> None:
        """Queue a job for the workers."""
        with self._lock:
            if self._closed:
                raise RuntimeError("job system has been shut down")
            self._jobs.put(job)

    def poll_results(self) -> List[JobResult]:
        """Return every result finished so far without waiting."""
        results = []
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                return results

    def shutdown(self) -> None:
        """Finish the queued jobs and stop the workers."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        for _ in self._workers:
            self._jobs.put(None)
        for worker in self._workers:
            worker.join()

    def __enter__(self) -> "JobSystem":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def generate_job_id() -> int:
    """A random 64-bit identifier for a job."""
    return random.getrandbits(64)


def process_results(
    results: MutableSequence[JobResult],
    should_process: Callable[[JobResult], bool],
    process: Callable[[JobResult], None],
) -> None:
    """Hand each result selected by ``should_process`` to ``process``, in order,
    and remove it from ``results``."""
    remaining = []
    for result in results:
        if should_process(result):
            process(result)
        else:
            remaining.append(result)
    results[:] = remaining