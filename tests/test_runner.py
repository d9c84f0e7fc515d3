"""
Tests for the job runner.
"""

from __future__ import annotations

import asyncio

import pytest

from jobwatch.events import EventLevel, InMemoryJobEventBus, MessageEvent, StateChange, StateChangeEvent
from jobwatch.runner import JobRunner


@pytest.fixture
def bus() -> InMemoryJobEventBus:
    return InMemoryJobEventBus()


@pytest.fixture
def received(bus) -> list:
    events: list = []
    bus.subscribe(StateChangeEvent, events.append)
    bus.subscribe(MessageEvent, events.append)
    return events


def kinds(events) -> list:
    return [e.state if isinstance(e, StateChangeEvent) else e.level for e in events]


class TestJobRunner:
    """Lifecycle events emitted while running jobs."""

    def test_job_ids_live_under_base_path(self, bus):
        runner = JobRunner(bus, management_base_path="/internal/")
        job_id = runner.new_job_id()

        assert job_id.startswith("/internal/jobs/")
        assert runner.new_job_id() != job_id

    @pytest.mark.asyncio
    async def test_successful_job(self, bus, received, job_factory):
        async def body(job, publisher):
            await publisher.info("working")

        runner = JobRunner(bus, keep_alive_interval=60)
        job_id = await runner.run(job_factory(body))

        assert kinds(received) == [StateChange.START, EventLevel.INFO, StateChange.STOP]
        assert {e.job_id for e in received} == {job_id}

    @pytest.mark.asyncio
    async def test_keep_alive_while_running(self, bus, received, job_factory):
        async def body(job, publisher):
            await asyncio.sleep(0.05)

        runner = JobRunner(bus, keep_alive_interval=0.01)
        await runner.run(job_factory(body))

        states = kinds(received)
        assert states[0] is StateChange.START
        assert states[-1] is StateChange.STOP
        assert StateChange.KEEP_ALIVE in states[1:-1]

    @pytest.mark.asyncio
    async def test_definition_overrides_keep_alive_interval(self, bus, received, job_factory):
        async def body(job, publisher):
            await asyncio.sleep(0.05)

        runner = JobRunner(bus, keep_alive_interval=60)
        await runner.run(job_factory(body, keep_alive_interval=0.01))

        assert StateChange.KEEP_ALIVE in kinds(received)

    @pytest.mark.asyncio
    async def test_failing_job_dies(self, bus, received, job_factory):
        async def body(job, publisher):
            raise RuntimeError("boom")

        runner = JobRunner(bus, keep_alive_interval=60)
        with pytest.raises(RuntimeError, match="boom"):
            await runner.run(job_factory(body))

        assert kinds(received) == [StateChange.START, EventLevel.ERROR, StateChange.DEAD]
        assert "boom" in received[1].message

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, bus, received, job_factory):
        async def body(job, publisher):
            if job.attempts == 1:
                raise RuntimeError("flaky")

        job = job_factory(body, retries=2)
        runner = JobRunner(bus, keep_alive_interval=60)
        await runner.run(job)

        assert job.attempts == 2
        assert kinds(received) == [
            StateChange.START,
            EventLevel.ERROR,
            StateChange.RESTART,
            StateChange.STOP,
        ]

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, bus, received, job_factory):
        async def body(job, publisher):
            raise RuntimeError(f"attempt {job.attempts}")

        job = job_factory(body, retries=1)
        runner = JobRunner(bus, keep_alive_interval=60)
        with pytest.raises(RuntimeError, match="attempt 2"):
            await runner.run(job)

        assert kinds(received) == [
            StateChange.START,
            EventLevel.ERROR,
            StateChange.RESTART,
            EventLevel.ERROR,
            StateChange.DEAD,
        ]

    @pytest.mark.asyncio
    async def test_submit_runs_in_background(self, bus, received, job_factory):
        started = asyncio.Event()
        release = asyncio.Event()

        async def body(job, publisher):
            started.set()
            await release.wait()

        runner = JobRunner(bus, keep_alive_interval=60)
        job_id = runner.submit(job_factory(body))
        await started.wait()

        assert runner.running_jobs() == [job_id]

        release.set()
        await runner.shutdown()

        assert runner.running_jobs() == []
        assert kinds(received) == [StateChange.START, StateChange.STOP]

    @pytest.mark.asyncio
    async def test_shutdown_swallows_background_failures(self, bus, received, job_factory):
        async def body(job, publisher):
            raise RuntimeError("boom")

        runner = JobRunner(bus, keep_alive_interval=60)
        runner.submit(job_factory(body))
        await runner.shutdown()

        assert kinds(received)[-1] is StateChange.DEAD

    def test_invalid_interval(self, bus):
        with pytest.raises(ValueError):
            JobRunner(bus, keep_alive_interval=0)
