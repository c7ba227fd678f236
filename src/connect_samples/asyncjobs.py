"""Polled long-running queries.

A job is a small state machine driven only by elapsed wall-clock time and a
failure flag: STARTED until first polled, RUNNING until its duration has
elapsed, then COMPLETED (result produced once) or FAILED. There is no
cancellation.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Literal

from .errors import ConnectorError, NotFoundError
from .graph.builder import ResultGraph
from .settings import settings

logger = logging.getLogger(__name__)

SubstatusType = Literal["information", "warning", "error"]


class JobState(str, Enum):
    STARTED = "STARTED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class Substatus:
    type: SubstatusType
    message: str


@dataclass(slots=True)
class AsyncJob:
    produce: Callable[[], ResultGraph]
    duration_seconds: float
    should_fail: bool = False
    failure: ConnectorError | None = None
    clock: Callable[[], float] = time.monotonic
    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    substatuses: list[Substatus] = field(default_factory=list)

    started_at: float = field(init=False)
    state: JobState = field(init=False, default=JobState.STARTED)
    result: ResultGraph | None = field(init=False, default=None)
    error: ConnectorError | None = field(init=False, default=None)
    finished_at: float | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.started_at = self.clock()

    def add_substatus(self, type: SubstatusType, message: str) -> None:
        self.substatuses.append(Substatus(type=type, message=message))

    @property
    def done(self) -> bool:
        return self.state in (JobState.COMPLETED, JobState.FAILED)

    def poll(self) -> JobState:
        """Advance the state machine and return the current state."""

        if self.done:
            return self.state
        elapsed = self.clock() - self.started_at
        if elapsed < self.duration_seconds:
            self.state = JobState.RUNNING
            return self.state

        if self.should_fail:
            self.error = self.failure or ConnectorError(
                "The asynchronous query failed", detail=f"Failed after {self.duration_seconds} seconds"
            )
            self.finished_at = self.clock()
            self.state = JobState.FAILED
            logger.info(f"Async job {self.job_id} failed: {self.error.title}")
            return self.state

        try:
            self.result = self.produce()
        except ConnectorError as e:
            self.error = e
            self.state = JobState.FAILED
            self.finished_at = self.clock()
            logger.warning(f"Async job {self.job_id} failed: {e.title}")
            return self.state
        self.state = JobState.COMPLETED
        self.finished_at = self.clock()
        return self.state

    def snapshot(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "queryId": self.job_id,
            "state": self.state.value,
            "substatuses": [{"type": s.type, "message": s.message} for s in self.substatuses],
        }
        if self.state is JobState.FAILED and self.error is not None:
            out["error"] = self.error.to_problem()
        return out


class AsyncJobStore:
    """In-memory jobs keyed by id. Each job is only touched by its own polls.

    Finished jobs are dropped `ttl_seconds` after they finish; later lookups
    of their ids raise NotFoundError.
    """

    def __init__(self, ttl_seconds: float | None = None) -> None:
        self.ttl_seconds = settings.async_job_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._jobs: dict[str, AsyncJob] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def evict_expired(self) -> int:
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.finished_at is not None and job.clock() - job.finished_at >= self.ttl_seconds
        ]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.debug(f"Evicted {len(expired)} finished async jobs")
        return len(expired)

    def submit(self, job: AsyncJob) -> str:
        self.evict_expired()
        self._jobs[job.job_id] = job
        logger.debug(f"Async job {job.job_id} submitted ({job.duration_seconds}s)")
        return job.job_id

    def get(self, job_id: str) -> AsyncJob:
        self.evict_expired()
        job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError(f"No asynchronous query with id '{job_id}'")
        return job

    def poll(self, job_id: str) -> AsyncJob:
        job = self.get(job_id)
        job.poll()
        return job

    def results(self, job_id: str) -> ResultGraph:
        job = self.poll(job_id)
        if job.state is JobState.FAILED and job.error is not None:
            raise job.error
        if job.result is None:
            raise ConnectorError(f"Asynchronous query '{job_id}' has not completed", status=409)
        return job.result
