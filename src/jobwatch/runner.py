"""
Job runner: executes a JobRunnable and announces its lifecycle.

For one execution the runner publishes START, then KEEP_ALIVE every
``keep_alive_interval`` seconds while the job runs, and finally STOP on
success or an ERROR message followed by DEAD once retries are exhausted.
Each retry is announced with an ERROR message and RESTART.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import suppress

from .events.bus import JobEventBus
from .events.publisher import JobEventPublisher
from .jobs.definition import JobRunnable
from .logging import get_logger

logger = get_logger(__name__)


class JobRunner:
    """Runs jobs and publishes their lifecycle events on a bus."""

    def __init__(
        self,
        bus: JobEventBus,
        *,
        management_base_path: str = "/internal",
        keep_alive_interval: float = 30.0,
    ):
        if keep_alive_interval <= 0:
            raise ValueError("keep_alive_interval must be positive")
        self._bus = bus
        self._base_path = management_base_path.rstrip("/")
        self._keep_alive_interval = keep_alive_interval
        self._background: dict[str, asyncio.Task] = {}

    def new_job_id(self) -> str:
        """URI-like id of a new job execution: ``{base_path}/jobs/{uuid}``."""
        return f"{self._base_path}/jobs/{uuid.uuid4()}"

    async def run(self, runnable: JobRunnable, job_id: str | None = None) -> str:
        """Run ``runnable`` to completion and return its job id.

        Raises:
            Exception: whatever the runnable raised on its final attempt,
                after DEAD has been published
        """
        job_id = job_id or self.new_job_id()
        publisher = JobEventPublisher(self._bus, runnable, job_id)
        definition = runnable.job_definition
        interval = definition.keep_alive_interval or self._keep_alive_interval

        await publisher.start()
        logger.info("Running job", extra={"job_id": job_id, "job_type": definition.job_type})

        keep_alive = asyncio.create_task(self._keep_alive(publisher, interval))
        try:
            error = await self._execute(runnable, publisher)
        finally:
            keep_alive.cancel()
            with suppress(asyncio.CancelledError):
                await keep_alive

        if error is None:
            await publisher.stop()
            logger.info("Job finished", extra={"job_id": job_id, "job_type": definition.job_type})
            return job_id

        await publisher.error(f"Job failed: {error}")
        await publisher.dead()
        logger.error(
            "Job died",
            extra={"job_id": job_id, "job_type": definition.job_type, "error": str(error)},
        )
        raise error

    def submit(self, runnable: JobRunnable) -> str:
        """Start ``runnable`` in the background and return its job id at once."""
        job_id = self.new_job_id()
        task = asyncio.create_task(self.run(runnable, job_id))
        self._background[job_id] = task
        task.add_done_callback(lambda t, jid=job_id: self._forget(jid, t))
        return job_id

    def running_jobs(self) -> list[str]:
        return list(self._background)

    async def shutdown(self) -> None:
        """Wait for background jobs; their failures have already been logged."""
        tasks = list(self._background.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _execute(self, runnable: JobRunnable, publisher: JobEventPublisher) -> Exception | None:
        definition = runnable.job_definition
        attempt = 0
        while True:
            try:
                await runnable.execute(publisher)
                return None
            except Exception as exc:
                if attempt >= definition.retries:
                    return exc
                attempt += 1
                logger.warning(
                    "Job failed, restarting",
                    extra={"job_id": publisher.job_id, "attempt": attempt, "retries": definition.retries},
                )
                await publisher.error(f"Attempt {attempt} of {definition.retries + 1} failed: {exc}")
                if definition.retry_delay:
                    await asyncio.sleep(definition.retry_delay)
                await publisher.restart()

    async def _keep_alive(self, publisher: JobEventPublisher, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await publisher.keep_alive()

    def _forget(self, job_id: str, task: asyncio.Task) -> None:
        self._background.pop(job_id, None)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Background job ended with an error", extra={"job_id": job_id})


__all__ = ["JobRunner"]
