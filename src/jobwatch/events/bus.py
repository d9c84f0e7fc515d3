"""
Event bus for job event distribution.

This module provides the JobEventBus abstraction and an in-process
implementation for publishing job events to subscribed handlers.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from ..errors import UnknownEventTypeError
from ..logging import get_logger
from .types import JobEvent, MessageEvent, StateChangeEvent

logger = get_logger(__name__)

EventHandler = Callable[[Any], Awaitable[None] | None]

EVENT_TYPES: tuple[type, ...] = (StateChangeEvent, MessageEvent)


@dataclass
class EventSubscription:
    """Subscription of one handler to one event type."""
    event_type: type
    handler: EventHandler
    subscription_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, event: JobEvent) -> bool:
        """Check if an event matches this subscription."""
        return isinstance(event, self.event_type)


class JobEventBus(ABC):
    """Abstract event bus for job events.

    Implementations must provide:
    - publish: Deliver an event to all matching subscribers
    - subscribe: Register a handler for one event type
    - unsubscribe: Remove a subscription
    - close: Stop delivering events

    A failing handler must never make ``publish`` fail.
    """

    @abstractmethod
    async def publish(self, event: JobEvent) -> None:
        """Publish an event to all matching subscribers."""
        ...

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> EventSubscription:
        """Register a handler and return the subscription."""
        ...

    @abstractmethod
    def unsubscribe(self, subscription: EventSubscription) -> None:
        """Remove a subscription."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the event bus and clean up resources."""
        ...


class InMemoryJobEventBus(JobEventBus):
    """In-process event bus.

    Dispatch modes:
    - ``sync``: handlers are awaited one after another inside ``publish``
    - ``task``: each delivery runs as its own task; ``drain()`` waits for them

    Handler exceptions are logged with the event's job id and swallowed here,
    so the publishing job is isolated from listener failures.
    """

    def __init__(self, dispatch: str = "sync"):
        if dispatch not in ("sync", "task"):
            raise ValueError(f"Invalid dispatch mode: {dispatch}")
        self._dispatch = dispatch
        self._subscriptions: dict[str, EventSubscription] = {}
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def publish(self, event: JobEvent) -> None:
        """Publish an event to all matching subscribers."""
        if not isinstance(event, EVENT_TYPES):
            raise UnknownEventTypeError(f"Cannot publish {type(event).__name__}")
        if self._closed:
            logger.debug("Bus closed, dropping event", extra={"job_id": event.job_id})
            return

        for subscription in list(self._subscriptions.values()):
            if not subscription.matches(event):
                continue
            if self._dispatch == "sync":
                await self._deliver(subscription, event)
            else:
                task = asyncio.create_task(self._deliver(subscription, event))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)

    def subscribe(self, event_type: type, handler: EventHandler) -> EventSubscription:
        """Register a handler for ``event_type`` and return the subscription."""
        if event_type not in EVENT_TYPES:
            raise UnknownEventTypeError(f"Cannot subscribe to {getattr(event_type, '__name__', event_type)}")
        subscription = EventSubscription(event_type=event_type, handler=handler)
        self._subscriptions[subscription.subscription_id] = subscription
        return subscription

    def unsubscribe(self, subscription: EventSubscription) -> None:
        """Remove a subscription."""
        self._subscriptions.pop(subscription.subscription_id, None)

    async def drain(self) -> None:
        """Wait until every delivery scheduled so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        """Stop accepting events, finish pending deliveries, drop subscribers."""
        self._closed = True
        await self.drain()
        self._subscriptions.clear()

    async def _deliver(self, subscription: EventSubscription, event: JobEvent) -> None:
        try:
            result = subscription.handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Job event handler failed",
                extra={
                    "job_id": event.job_id,
                    "job_type": event.job_type,
                    "event_type": type(event).__name__,
                    "subscription_id": subscription.subscription_id,
                },
            )


__all__ = [
    "EventHandler",
    "EventSubscription",
    "JobEventBus",
    "InMemoryJobEventBus",
]
