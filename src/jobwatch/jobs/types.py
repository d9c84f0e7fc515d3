"""
Job types.

This module defines the JobStatus and JobMessageLevel enums and the
JobRecord / JobMessage dataclasses that hold the persisted state of one job
execution.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from ..clock import Clock, SystemClock


class JobStatus(str, Enum):
    """Job lifecycle states.

    State transitions:
    - (none) -> RUNNING (START)
    - RUNNING -> RUNNING (KEEP_ALIVE, only the timestamp moves)
    - RUNNING -> RESTARTED (RESTART)
    - * -> STOPPED (STOP)
    - * -> DEAD (DEAD)

    Late events on a terminal record are still applied.
    """
    RUNNING = "running"
    RESTARTED = "restarted"
    STOPPED = "stopped"
    DEAD = "dead"

    @property
    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in {JobStatus.STOPPED, JobStatus.DEAD}

    @property
    def is_active(self) -> bool:
        """Check if the job is still running."""
        return not self.is_terminal


class JobMessageLevel(str, Enum):
    """Severity of a persisted job message."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class JobMessage:
    """A single log line of a job execution."""
    level: JobMessageLevel
    message: str
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "message": self.message,
            "timestamp": _format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobMessage:
        return cls(
            level=JobMessageLevel(data["level"]),
            message=data["message"],
            timestamp=_parse_timestamp(data["timestamp"]),
        )


_IMMUTABLE_FIELDS = frozenset({"job_id", "job_type"})


@dataclass
class JobRecord:
    """Persistent record of a job execution.

    Mutated in place by lifecycle events. ``job_id`` and ``job_type`` are
    fixed at construction, ``messages`` only grows and ``last_updated`` never
    moves backwards.
    """
    # Identity
    job_id: str
    job_type: str

    # Origin
    started: datetime
    hostname: str

    # Status
    status: JobStatus = JobStatus.RUNNING
    last_updated: datetime | None = None
    stopped: datetime | None = None

    # Log
    messages: list[JobMessage] = field(default_factory=list)

    clock: Clock = field(default_factory=SystemClock, compare=False, repr=False)

    def __post_init__(self):
        if self.last_updated is None:
            self.last_updated = self.started

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"JobRecord.{name} cannot be changed once set")
        super().__setattr__(name, value)

    @classmethod
    def new(cls, job_id: str, job_type: str, clock: Clock, hostname: str) -> JobRecord:
        """Create the record for a job that has just started."""
        now = clock.now()
        return cls(
            job_id=job_id,
            job_type=job_type,
            started=now,
            hostname=hostname,
            status=JobStatus.RUNNING,
            last_updated=now,
            clock=clock,
        )

    # Lifecycle mutations

    def ping(self) -> None:
        """Record a keep-alive; status is unchanged."""
        self._touch()

    def restart(self) -> None:
        self.status = JobStatus.RESTARTED
        self.stopped = None
        self._touch()

    def stop(self) -> None:
        self.status = JobStatus.STOPPED
        self.stopped = self._touch()

    def dead(self) -> None:
        self.status = JobStatus.DEAD
        self.stopped = self._touch()

    def append_message(self, message: JobMessage) -> None:
        self.messages.append(message)

    def _touch(self) -> datetime:
        now = self.clock.now()
        if self.last_updated is None or now > self.last_updated:
            self.last_updated = now
        return self.last_updated

    def copy(self) -> JobRecord:
        """Detached copy sharing the clock; the message list is not shared."""
        return replace(self, messages=list(self.messages))

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal

    def to_dict(self, include_messages: bool = True) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {
            "job_id": self.job_id,
            "job_type": self.job_type,
            "started": _format_timestamp(self.started),
            "hostname": self.hostname,
            "status": self.status.value,
            "last_updated": _format_timestamp(self.last_updated),
            "stopped": _format_timestamp(self.stopped),
        }
        if include_messages:
            data["messages"] = [m.to_dict() for m in self.messages]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], clock: Clock | None = None) -> JobRecord:
        """Deserialize from dictionary."""
        return cls(
            job_id=data["job_id"],
            job_type=data["job_type"],
            started=_parse_timestamp(data["started"]),
            hostname=data["hostname"],
            status=JobStatus(data.get("status", "running")),
            last_updated=_parse_timestamp(data.get("last_updated")),
            stopped=_parse_timestamp(data.get("stopped")),
            messages=[JobMessage.from_dict(m) for m in data.get("messages", [])],
            clock=clock or SystemClock(),
        )


__all__ = [
    "JobStatus",
    "JobMessageLevel",
    "JobMessage",
    "JobRecord",
]
