"""
Tests for job record types.
"""

from __future__ import annotations

import pytest

from jobwatch.clock import FixedClock
from jobwatch.jobs import JobDefinition, JobMessage, JobMessageLevel, JobRecord, JobStatus


@pytest.fixture
def record(clock) -> JobRecord:
    return JobRecord.new("some/job", "someJobType", clock, "localhost")


class TestJobRecord:
    """Lifecycle mutations on JobRecord."""

    def test_new_record(self, record, clock):
        assert record.status is JobStatus.RUNNING
        assert record.started == clock.now()
        assert record.last_updated == clock.now()
        assert record.stopped is None
        assert not record.is_finished

    def test_ping_keeps_status(self, record, clock):
        later = clock.advance(5)
        record.ping()

        assert record.status is JobStatus.RUNNING
        assert record.last_updated == later

    def test_restart(self, record, clock):
        later = clock.advance(5)
        record.restart()

        assert record.status is JobStatus.RESTARTED
        assert record.last_updated == later
        assert record.status.is_active

    def test_stop_sets_stopped(self, record, clock):
        later = clock.advance(5)
        record.stop()

        assert record.status is JobStatus.STOPPED
        assert record.stopped == later
        assert record.is_finished

    def test_dead_sets_stopped(self, record, clock):
        later = clock.advance(5)
        record.dead()

        assert record.status is JobStatus.DEAD
        assert record.stopped == later
        assert record.status.is_terminal

    def test_last_updated_never_moves_backwards(self, record, clock):
        clock.advance(10)
        record.ping()
        newest = record.last_updated

        record.clock = FixedClock(record.started)
        record.stop()

        assert record.last_updated == newest
        assert record.stopped == newest

    @pytest.mark.parametrize("name", ["job_id", "job_type"])
    def test_identity_is_immutable(self, record, name):
        with pytest.raises(AttributeError):
            setattr(record, name, "other")

    def test_messages_only_grow(self, record, clock):
        first = JobMessage(JobMessageLevel.INFO, "one", clock.now())
        second = JobMessage(JobMessageLevel.ERROR, "two", clock.now())

        record.append_message(first)
        record.append_message(second)

        assert record.messages == [first, second]

    def test_equality_ignores_clock(self, clock):
        a = JobRecord.new("some/job", "someJobType", clock, "localhost")
        b = JobRecord.new("some/job", "someJobType", FixedClock(clock.now()), "localhost")
        assert a == b

    def test_copy_is_detached(self, record, clock):
        copied = record.copy()
        copied.append_message(JobMessage(JobMessageLevel.INFO, "only in copy", clock.now()))
        copied.stop()

        assert record.messages == []
        assert record.status is JobStatus.RUNNING
        assert copied.clock is record.clock


class TestSerialization:
    """Dictionary serialization used by stores."""

    def test_round_trip(self, record, clock):
        record.append_message(JobMessage(JobMessageLevel.WARNING, "careful", clock.now()))
        record.stop()

        restored = JobRecord.from_dict(record.to_dict(), clock=clock)

        assert restored == record

    def test_to_dict_values(self, record):
        data = record.to_dict(include_messages=False)

        assert data["job_id"] == "some/job"
        assert data["status"] == "running"
        assert data["started"] == "2024-03-01T12:00:00+00:00"
        assert data["stopped"] is None
        assert "messages" not in data

    def test_message_to_dict(self, clock):
        message = JobMessage(JobMessageLevel.ERROR, "boom", clock.now())
        assert message.to_dict() == {
            "level": "error",
            "message": "boom",
            "timestamp": "2024-03-01T12:00:00+00:00",
        }


class TestJobDefinition:
    """Validation of job definitions."""

    def test_defaults(self):
        definition = JobDefinition("import", "Product import")
        assert definition.retries == 0
        assert definition.keep_alive_interval is None

    def test_validation(self):
        with pytest.raises(ValueError, match="job_type cannot be empty"):
            JobDefinition("", "nameless")
        with pytest.raises(ValueError, match="retries cannot be negative"):
            JobDefinition("import", "Product import", retries=-1)
        with pytest.raises(ValueError, match="keep_alive_interval must be positive"):
            JobDefinition("import", "Product import", keep_alive_interval=0)
