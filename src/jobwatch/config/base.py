"""
Base types for configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

StoreBackendType = Literal["memory", "redis"]
DispatchMode = Literal["sync", "task"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["text", "json"]


class MissingRecordPolicy(str, Enum):
    """What the listener does with a lifecycle event for an unknown job.

    - IGNORE: drop the event (debug log only)
    - WARN: drop the event and log a warning
    - CREATE: synthesize a record for the job, then apply the transition
    """

    IGNORE = "ignore"
    WARN = "warn"
    CREATE = "create"


__all__ = ["StoreBackendType", "DispatchMode", "LogLevel", "LogFormat", "MissingRecordPolicy"]
