"""
Per-job event publisher handed to a running job.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .bus import JobEventBus
from .types import (
    EventLevel,
    JobEvent,
    StateChange,
    new_message_event,
    new_state_change_event,
)

if TYPE_CHECKING:
    from ..jobs.definition import JobRunnable


class JobEventPublisher:
    """Announces state transitions and log messages of one job execution.

    Example:
        ```python
        async def execute(self, publisher):
            await publisher.info("importing 42 products")
            ...
            await publisher.warn("3 products skipped")
        ```
    """

    def __init__(self, bus: JobEventBus, source: JobRunnable, job_id: str):
        self._bus = bus
        self._source = source
        self._job_id = job_id

    @property
    def job_id(self) -> str:
        return self._job_id

    @property
    def source(self) -> JobRunnable:
        return self._source

    async def publish(self, event: JobEvent) -> None:
        await self._bus.publish(event)

    async def state_changed(self, state: StateChange) -> None:
        await self.publish(new_state_change_event(self._source, self._job_id, state))

    async def message(self, level: EventLevel, message: str) -> None:
        await self.publish(new_message_event(self._source, self._job_id, level, message))

    async def start(self) -> None:
        await self.state_changed(StateChange.START)

    async def keep_alive(self) -> None:
        await self.state_changed(StateChange.KEEP_ALIVE)

    async def restart(self) -> None:
        await self.state_changed(StateChange.RESTART)

    async def stop(self) -> None:
        await self.state_changed(StateChange.STOP)

    async def dead(self) -> None:
        await self.state_changed(StateChange.DEAD)

    async def info(self, message: str) -> None:
        await self.message(EventLevel.INFO, message)

    async def warn(self, message: str) -> None:
        await self.message(EventLevel.WARN, message)

    async def error(self, message: str) -> None:
        await self.message(EventLevel.ERROR, message)


__all__ = ["JobEventPublisher"]
