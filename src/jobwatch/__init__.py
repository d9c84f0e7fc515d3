"""
jobwatch: lifecycle tracking for background jobs.

Running jobs publish state changes and log messages; a persistence listener
folds them into job records that status pages can read.

Example:
    ```python
    from jobwatch import create_job_pipeline

    pipeline = create_job_pipeline()
    job_id = await pipeline.runner.run(MyImportJob())
    record = await pipeline.store.find_one(job_id)
    ```
"""

from .clock import Clock, FixedClock, SystemClock
from .config import MissingRecordPolicy, Settings, configure, get_settings, load_env
from .errors import (
    ConfigurationError,
    ErrorCode,
    InvalidEventError,
    JobWatchError,
    UnknownEventTypeError,
)
from .events import (
    EventLevel,
    InMemoryJobEventBus,
    JobEventBus,
    JobEventPublisher,
    MessageEvent,
    PersistenceJobEventListener,
    StateChange,
    StateChangeEvent,
    new_message_event,
    new_state_change_event,
)
from .factory import JobPipeline, build_listener, build_store, create_job_pipeline
from .jobs import (
    InMemoryJobRecordStore,
    JobDefinition,
    JobFilter,
    JobMessage,
    JobMessageLevel,
    JobRecord,
    JobRecordStore,
    JobRunnable,
    JobStatus,
)
from .logging import configure_logging, get_logger
from .navigation import NavBar, NavBarItem
from .runner import JobRunner
from .system_info import SystemInfo

__version__ = "0.1.0"

__all__ = [
    # Clock / identity
    "Clock",
    "SystemClock",
    "FixedClock",
    "SystemInfo",
    # Jobs
    "JobDefinition",
    "JobRunnable",
    "JobStatus",
    "JobMessageLevel",
    "JobMessage",
    "JobRecord",
    "JobFilter",
    "JobRecordStore",
    "InMemoryJobRecordStore",
    # Events
    "StateChange",
    "EventLevel",
    "StateChangeEvent",
    "MessageEvent",
    "new_state_change_event",
    "new_message_event",
    "JobEventBus",
    "InMemoryJobEventBus",
    "JobEventPublisher",
    "PersistenceJobEventListener",
    # Runner / wiring
    "JobRunner",
    "JobPipeline",
    "build_store",
    "build_listener",
    "create_job_pipeline",
    # Navigation
    "NavBar",
    "NavBarItem",
    # Config
    "Settings",
    "MissingRecordPolicy",
    "get_settings",
    "configure",
    "load_env",
    # Logging
    "configure_logging",
    "get_logger",
    # Errors
    "ErrorCode",
    "JobWatchError",
    "InvalidEventError",
    "UnknownEventTypeError",
    "ConfigurationError",
]
