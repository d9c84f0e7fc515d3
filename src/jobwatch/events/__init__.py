"""
Event pipeline for jobwatch.

Running jobs publish StateChangeEvent / MessageEvent instances through a
JobEventPublisher; the bus hands them to the PersistenceJobEventListener,
which keeps the job records up to date.
"""

from .types import (
    StateChange,
    EventLevel,
    StateChangeEvent,
    MessageEvent,
    JobEvent,
    new_state_change_event,
    new_message_event,
)
from .bus import (
    EventSubscription,
    JobEventBus,
    InMemoryJobEventBus,
)
from .publisher import JobEventPublisher
from .listener import (
    MESSAGE_LEVELS,
    RECORD_TRANSITIONS,
    PersistenceJobEventListener,
    to_job_message_level,
)

__all__ = [
    # Event types
    "StateChange",
    "EventLevel",
    "StateChangeEvent",
    "MessageEvent",
    "JobEvent",
    "new_state_change_event",
    "new_message_event",
    # Bus
    "EventSubscription",
    "JobEventBus",
    "InMemoryJobEventBus",
    # Publisher / listener
    "JobEventPublisher",
    "PersistenceJobEventListener",
    "MESSAGE_LEVELS",
    "RECORD_TRANSITIONS",
    "to_job_message_level",
]
