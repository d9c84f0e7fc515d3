"""
Persistence listener: folds job events into job records.

Lifecycle events become ``find_one -> mutate -> create_or_update`` sequences
on the record store; message events become a single ``append_message``.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import AsyncContextManager

from ..clock import Clock, SystemClock
from ..concurrency import KeyedLock
from ..config.base import MissingRecordPolicy
from ..errors import ErrorContext, InvalidEventError
from ..jobs.store import JobRecordStore
from ..jobs.types import JobMessage, JobMessageLevel, JobRecord
from ..logging import get_logger
from ..system_info import SystemInfo
from .bus import EventSubscription, JobEventBus
from .types import EventLevel, MessageEvent, StateChange, StateChangeEvent

logger = get_logger(__name__)


# JobRecord method applied for each transition on an existing record.
# START is absent: it always builds a fresh record.
RECORD_TRANSITIONS: dict[StateChange, str] = {
    StateChange.KEEP_ALIVE: "ping",
    StateChange.RESTART: "restart",
    StateChange.STOP: "stop",
    StateChange.DEAD: "dead",
}

# Event vocabulary -> persisted vocabulary
MESSAGE_LEVELS: dict[EventLevel, JobMessageLevel] = {
    EventLevel.INFO: JobMessageLevel.INFO,
    EventLevel.WARN: JobMessageLevel.WARNING,
    EventLevel.ERROR: JobMessageLevel.ERROR,
}


def to_job_message_level(level: EventLevel) -> JobMessageLevel:
    try:
        return MESSAGE_LEVELS[level]
    except KeyError:
        raise InvalidEventError(f"Unsupported message level: {level!r}") from None


class PersistenceJobEventListener:
    """Translates job events into record store calls.

    The listener performs no retries: any store failure propagates to the
    caller (normally the event bus, which logs and isolates it).

    With ``serialize_per_job`` (the default) the read-modify-write sequence for
    a job id runs under a lock keyed by that id, so concurrent events for the
    same job cannot lose each other's updates. Message appends take the same
    lock. Events for different jobs never wait on each other.
    """

    def __init__(
        self,
        store: JobRecordStore,
        clock: Clock | None = None,
        system_info: SystemInfo | None = None,
        *,
        missing_record_policy: MissingRecordPolicy = MissingRecordPolicy.IGNORE,
        serialize_per_job: bool = True,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._system_info = system_info or SystemInfo.from_environment()
        self._missing_record_policy = MissingRecordPolicy(missing_record_policy)
        self._locks = KeyedLock() if serialize_per_job else None

    @property
    def missing_record_policy(self) -> MissingRecordPolicy:
        return self._missing_record_policy

    def subscribe(self, bus: JobEventBus) -> list[EventSubscription]:
        """Register both handlers on ``bus``."""
        return [
            bus.subscribe(StateChangeEvent, self.consume_state_change),
            bus.subscribe(MessageEvent, self.consume_message),
        ]

    async def consume_state_change(self, event: StateChangeEvent) -> None:
        if not isinstance(event, StateChangeEvent):
            raise InvalidEventError(f"Expected StateChangeEvent, got {type(event).__name__}")

        async with self._guard(event.job_id):
            if event.state is StateChange.START:
                await self._start(event)
                return

            record = await self._store.find_one(event.job_id)
            if record is None:
                record = self._on_missing_record(event)
                if record is None:
                    return
            # Refresh timestamps come from this listener, whatever clock the store attached
            record.clock = self._clock

            getattr(record, RECORD_TRANSITIONS[event.state])()
            await self._store.create_or_update(record)
            logger.debug(
                "Job state changed",
                extra={"job_id": event.job_id, "state": event.state.value},
            )

    async def consume_message(self, event: MessageEvent) -> None:
        if not isinstance(event, MessageEvent):
            raise InvalidEventError(f"Expected MessageEvent, got {type(event).__name__}")

        message = JobMessage(
            level=to_job_message_level(event.level),
            message=event.message,
            timestamp=self._clock.now(),
        )
        # Same lock as state changes: a whole-record save must not drop this append
        async with self._guard(event.job_id):
            await self._store.append_message(event.job_id, message)

    async def _start(self, event: StateChangeEvent) -> None:
        record = self._new_record(event)
        await self._store.create_or_update(record)
        logger.info(
            "Job started",
            extra={"job_id": event.job_id, "job_type": event.job_type, "hostname": record.hostname},
        )

    def _new_record(self, event: StateChangeEvent) -> JobRecord:
        return JobRecord.new(
            job_id=event.job_id,
            job_type=event.job_type,
            clock=self._clock,
            hostname=self._system_info.hostname,
        )

    def _on_missing_record(self, event: StateChangeEvent) -> JobRecord | None:
        context = ErrorContext(job_id=event.job_id, job_type=event.job_type, operation=event.state.value)
        policy = self._missing_record_policy

        if policy is MissingRecordPolicy.CREATE:
            logger.info("Creating record for unknown job", extra=context.to_dict())
            return self._new_record(event)

        if policy is MissingRecordPolicy.WARN:
            logger.warning("Dropping state change for unknown job", extra=context.to_dict())
        else:
            logger.debug("Dropping state change for unknown job", extra=context.to_dict())
        return None

    def _guard(self, job_id: str) -> AsyncContextManager[None]:
        if self._locks is None:
            return nullcontext()
        return self._locks(job_id)


__all__ = [
    "RECORD_TRANSITIONS",
    "MESSAGE_LEVELS",
    "to_job_message_level",
    "PersistenceJobEventListener",
]
