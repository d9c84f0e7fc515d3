"""
Job event types.

Two immutable event kinds flow from a running job to its listeners:
- StateChangeEvent: a lifecycle transition (start, keep-alive, restart, stop, dead)
- MessageEvent: one log line with a severity

Both carry the originating runnable and the id of the job execution they
belong to. An event without a job id is rejected at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import ErrorContext, InvalidEventError

if TYPE_CHECKING:
    from ..jobs.definition import JobRunnable


class StateChange(str, Enum):
    """Lifecycle transitions a job can announce."""
    START = "start"
    KEEP_ALIVE = "keep_alive"
    RESTART = "restart"
    STOP = "stop"
    DEAD = "dead"


class EventLevel(str, Enum):
    """Severity of a message event."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


def _validate(event: Any, enum_field: str, enum_type: type[Enum]) -> None:
    kind = type(event).__name__
    if event.source is None:
        raise InvalidEventError(f"{kind} requires an originating job")
    if event.job_id is None or not str(event.job_id).strip():
        raise InvalidEventError(
            f"{kind} requires a job id",
            context=ErrorContext(job_type=event.source.job_type),
        )
    if not isinstance(getattr(event, enum_field), enum_type):
        raise InvalidEventError(
            f"{kind}.{enum_field} must be a {enum_type.__name__}, got {getattr(event, enum_field)!r}",
            context=ErrorContext(job_id=str(event.job_id), job_type=event.source.job_type),
        )


@dataclass(frozen=True)
class StateChangeEvent:
    """A lifecycle transition of one job execution."""
    source: JobRunnable
    job_id: str
    state: StateChange

    def __post_init__(self):
        _validate(self, "state", StateChange)

    @property
    def job_type(self) -> str:
        return self.source.job_type


@dataclass(frozen=True)
class MessageEvent:
    """A log line emitted by one job execution."""
    source: JobRunnable
    job_id: str
    level: EventLevel
    message: str

    def __post_init__(self):
        _validate(self, "level", EventLevel)
        if self.message is None:
            raise InvalidEventError(
                "MessageEvent requires a message",
                context=ErrorContext(job_id=self.job_id, job_type=self.job_type),
            )

    @property
    def job_type(self) -> str:
        return self.source.job_type


JobEvent = StateChangeEvent | MessageEvent


def new_state_change_event(source: JobRunnable, job_id: str, state: StateChange) -> StateChangeEvent:
    return StateChangeEvent(source=source, job_id=job_id, state=state)


def new_message_event(source: JobRunnable, job_id: str, level: EventLevel, message: str) -> MessageEvent:
    return MessageEvent(source=source, job_id=job_id, level=level, message=message)


__all__ = [
    "StateChange",
    "EventLevel",
    "StateChangeEvent",
    "MessageEvent",
    "JobEvent",
    "new_state_change_event",
    "new_message_event",
]
